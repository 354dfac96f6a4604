import random
from datetime import datetime

import pytest

from sentinelfs.ml_demo import (
    AnomalyResult,
    PredictionResult,
    SimpleMLAnalyzer,
    generate_anomalous_features,
    generate_network_features,
    generate_normal_features,
    main,
)


@pytest.fixture
def analyzer():
    return SimpleMLAnalyzer()


def test_empty_features(analyzer):
    assert analyzer.detect_anomaly([]) == AnomalyResult(False, 0.0, "Empty features")


def test_clear_anomaly_is_detected_and_confidence_capped(analyzer):
    result = analyzer.detect_anomaly([2.0, 150.0, 0.9])
    assert result.is_anomaly
    assert result.confidence == 1.0
    assert result.description == "Anomalous access pattern detected"


def test_normal_access(analyzer):
    result = analyzer.detect_anomaly([12.0, 5.0, 0.3])
    assert result == AnomalyResult(False, 0.0, "Normal access pattern")


def test_threshold_controls_detection():
    strict = SimpleMLAnalyzer(anomaly_threshold=1.5)
    result = strict.detect_anomaly([2.0, 150.0, 0.9])
    assert not result.is_anomaly
    assert result.description == "Normal access pattern"


def test_threshold_attribute_can_be_changed(analyzer):
    analyzer.anomaly_threshold = 0.0
    assert analyzer.detect_anomaly([12.0, 60.0]).is_anomaly


@pytest.mark.parametrize("seed", range(50))
def test_generated_normal_features_are_normal(analyzer, seed):
    features = generate_normal_features(random.Random(seed))
    assert len(features) == 3
    assert 10.0 <= features[0] <= 15.0
    assert not analyzer.detect_anomaly(features).is_anomaly


@pytest.mark.parametrize("seed", range(50))
def test_generated_anomalous_features_are_anomalous(analyzer, seed):
    features = generate_anomalous_features(random.Random(seed))
    assert len(features) == 3
    assert features[0] <= 5.0 or 22.0 <= features[0] <= 23.9
    assert 50.0 <= features[1] <= 250.0
    assert analyzer.detect_anomaly(features).is_anomaly


def test_generators_are_deterministic_with_seed():
    first = generate_network_features(random.Random(7))
    second = generate_network_features(random.Random(7))
    assert first == second
    assert len(first) == 4
    assert 20.0 <= first[0] <= 170.0
    assert 5.0 <= first[1] <= 50.0
    assert 0.0 <= first[2] <= 0.2
    assert 0.5 <= first[3] <= 1.0


@pytest.mark.parametrize(
    "hour, probability",
    [(9, 0.8), (17, 0.8), (18, 0.6), (21, 0.6), (22, 0.3), (3, 0.3)],
)
def test_predict_file_access_by_hour(analyzer, hour, probability):
    predictions = analyzer.predict_file_access("test_user", datetime(2024, 1, 1, hour))
    assert predictions == [
        PredictionResult(f"/predicted/file_{hour}.txt", probability)
    ]


def test_network_gain_with_too_few_features(analyzer):
    assert analyzer.predict_network_optimization_gain([50.0]) == 0.1


def test_network_gain_is_capped(analyzer):
    assert analyzer.predict_network_optimization_gain([500.0, 0.0]) == 0.95


@pytest.mark.parametrize("seed", range(20))
def test_network_gain_bounds_and_monotonic(analyzer, seed):
    features = generate_network_features(random.Random(seed))
    assert len(features) == 4
    gain = analyzer.predict_network_optimization_gain(features)
    assert 0.0 <= gain <= 0.95
    slower = [features[0] + 10.0] + features[1:]
    assert analyzer.predict_network_optimization_gain(slower) >= gain


def test_feedback_message(analyzer, capsys):
    message = analyzer.provide_feedback([1.0], True, False)
    assert message == "Feedback received: Anomaly (incorrectly identified)"
    assert capsys.readouterr().out.strip() == message


def test_main_runs(capsys):
    assert main(["--seed", "1"]) == 0
    out = capsys.readouterr().out
    assert "Demo completed successfully!" in out
    assert "Generated 1 predictions" in out