import pytest

from watermon.services.parameters import PARAMETERS, Bounds, ParameterSpec, get_parameter
from watermon.services.severity import Severity, Status, classify, is_out_of_range

ORP = PARAMETERS["ORP"]
TURBIDITY = PARAMETERS["turbidity"]


@pytest.mark.parametrize("value", [200, 200.0001, 500, 799.9, 800])
def test_inside_safe_range_is_normal(value):
    result = classify(ORP, value)
    assert result.severity is Severity.NONE
    assert result.status is Status.NORMAL


def test_orp_example_ladder():
    gap = classify(ORP, 850)
    assert gap.severity is Severity.NONE
    assert gap.status is Status.SLIGHTLY_HIGH
    assert gap.deviation == 50

    minor = classify(ORP, 920)
    assert minor.severity is Severity.MINOR
    assert minor.status.label == "slightly high"

    assert classify(ORP, 1050).severity is Severity.AVERAGE
    assert classify(ORP, 1050).status is Status.TOO_HIGH

    major = classify(ORP, 1150)
    assert major.severity is Severity.MAJOR
    assert major.status.label == "critically high"


def test_threshold_boundary_is_inclusive():
    assert classify(ORP, 900).severity is Severity.MINOR
    assert classify(ORP, 1000).severity is Severity.AVERAGE
    assert classify(ORP, 1100).severity is Severity.MAJOR
    assert classify(ORP, 100).severity is Severity.MINOR
    assert classify(ORP, 100).status is Status.SLIGHTLY_LOW


@pytest.mark.parametrize("value", [-100, -1000, -1e9])
def test_far_below_major_stays_major(value):
    result = classify(ORP, value)
    assert result.severity is Severity.MAJOR
    assert result.status is Status.CRITICALLY_LOW


def test_severity_is_non_decreasing_with_deviation():
    ranks = [classify(ORP, 800 + d).severity.rank for d in range(0, 500, 5)]
    assert ranks == sorted(ranks)
    assert ranks[0] == 0 and ranks[-1] == Severity.MAJOR.rank


def test_zero_threshold_side_never_flags():
    result = classify(TURBIDITY, -100)
    assert result.severity is Severity.NONE
    assert result.status is Status.SLIGHTLY_LOW
    # the high side still applies
    assert classify(TURBIDITY, 300).severity is Severity.MAJOR


def test_is_out_of_range_includes_tier_gap():
    assert not is_out_of_range(ORP, 800)
    assert is_out_of_range(ORP, 850)
    assert is_out_of_range(ORP, 1150)


def test_thresholds_must_not_decrease():
    with pytest.raises(ValueError):
        ParameterSpec(
            name="bad",
            unit="",
            valid_range=Bounds(0, 10),
            safe_range=Bounds(2, 8),
            severity_thresholds={"minor": Bounds(1, 1), "average": Bounds(0.5, 2), "major": Bounds(3, 3)},
        )


def test_safe_range_must_be_ordered():
    with pytest.raises(ValueError):
        ParameterSpec(
            name="bad",
            unit="",
            valid_range=Bounds(0, 10),
            safe_range=Bounds(8, 2),
            severity_thresholds={"minor": Bounds(1, 1), "average": Bounds(2, 2), "major": Bounds(3, 3)},
        )


def test_normalize_clamps_to_valid_range():
    ph = get_parameter("pH")
    assert ph.normalize(7) == pytest.approx(0.5)
    assert ph.normalize(-3) == 0.0
    assert ph.normalize(20) == 1.0


def test_unknown_parameter_is_not_monitored():
    assert get_parameter("chlorine") is None
