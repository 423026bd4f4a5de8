from qexplore.coord.anomaly import analyze_circle, find_all_anomalies, find_all_winners, find_winner
from qexplore.coord.sampler import generate_points_in_circle
from qexplore.domain.models import ANOMALY_ORDER, AnomalyType, CircleResult, Coordinates, Point
from qexplore.rng.pseudo import SeededPseudoSource

NYC = Coordinates(lat=40.7128, lng=-74.0060)


def _circle(cid: str, **anomalies: Point) -> CircleResult:
    return CircleResult(
        id=cid,
        center=NYC,
        radius=1000.0,
        anomalies={AnomalyType(k): v for k, v in anomalies.items()},
    )


def _pt(z: float | None = None, lat: float = 0.0, is_attractor: bool | None = None) -> Point:
    return Point(coords=Coordinates(lat=lat, lng=0.0), z_score=z, is_attractor=is_attractor)


def test_no_points_means_no_anomalies():
    assert find_all_anomalies(NYC, 1000.0, [], 50) == {}


def test_all_anomaly_types_from_sampled_points():
    points = generate_points_in_circle(NYC, 1000.0, 10_000, SeededPseudoSource(42))
    found = find_all_anomalies(NYC, 1000.0, points, 50)

    assert list(found) == list(ANOMALY_ORDER)
    assert found[AnomalyType.BLIND_SPOT].coords == points[0]
    assert found[AnomalyType.BLIND_SPOT].z_score is None
    assert found[AnomalyType.ATTRACTOR].z_score > 0
    assert found[AnomalyType.VOID].z_score < 0

    power = found[AnomalyType.POWER]
    assert power.is_attractor == (power.z_score > 0)
    assert abs(power.z_score) == max(
        abs(found[AnomalyType.ATTRACTOR].z_score), abs(found[AnomalyType.VOID].z_score)
    )


def test_analyze_circle_keeps_points_only_on_request():
    with_points = analyze_circle("center", NYC, 1000.0, 500, 20, True, SeededPseudoSource(1))
    without = analyze_circle("center", NYC, 1000.0, 500, 20, False, SeededPseudoSource(1))

    assert with_points.id == "center"
    assert with_points.radius == 1000.0
    assert len(with_points.points) == 500
    assert without.points is None
    # Same seed, same draws, same analysis.
    assert with_points.anomalies == without.anomalies


def test_analyze_circle_with_zero_points_is_empty():
    result = analyze_circle("center", NYC, 1000.0, 0, 50, True, SeededPseudoSource(1))
    assert result.anomalies == {}
    assert result.points == []


def test_attractor_winner_is_highest_z_and_ties_keep_the_first_circle():
    circles = [
        _circle("center", attractor=_pt(2.0, lat=1.0)),
        _circle("petal_0", attractor=_pt(3.5, lat=2.0)),
        _circle("petal_1", attractor=_pt(3.5, lat=3.0)),
    ]
    winner = find_winner(circles, AnomalyType.ATTRACTOR)
    assert winner.circle_id == "petal_0"
    assert winner.result.coords.lat == 2.0


def test_void_winner_is_lowest_z():
    circles = [
        _circle("center", void=_pt(-1.0)),
        _circle("petal_0", void=_pt(-4.0)),
        _circle("petal_1", void=_pt(-2.0)),
    ]
    assert find_winner(circles, AnomalyType.VOID).circle_id == "petal_0"


def test_power_winner_compares_absolute_z():
    circles = [
        _circle("center", power=_pt(3.0, is_attractor=True)),
        _circle("petal_0", power=_pt(-5.0, is_attractor=False)),
        _circle("petal_1", power=_pt(5.0, is_attractor=True)),
    ]
    winner = find_winner(circles, AnomalyType.POWER)
    assert winner.circle_id == "petal_0"
    assert winner.result.is_attractor is False


def test_blind_spot_winner_is_the_first_circle_that_has_one():
    circles = [
        _circle("center"),
        _circle("petal_0", blind_spot=_pt(lat=7.0)),
        _circle("petal_1", blind_spot=_pt(lat=8.0)),
    ]
    winner = find_winner(circles, AnomalyType.BLIND_SPOT)
    assert winner.circle_id == "petal_0"
    assert winner.result.coords.lat == 7.0


def test_missing_types_have_no_winner():
    circles = [_circle("center", blind_spot=_pt()), _circle("petal_0", blind_spot=_pt())]
    winners = find_all_winners(circles)
    assert list(winners) == [AnomalyType.BLIND_SPOT]
    assert find_winner([], AnomalyType.ATTRACTOR) is None


def test_winner_keys_follow_the_fixed_order():
    circles = [
        _circle("center", power=_pt(1.0, is_attractor=True), void=_pt(-1.0)),
        _circle("petal_0", attractor=_pt(2.0), blind_spot=_pt()),
    ]
    assert list(find_all_winners(circles)) == list(ANOMALY_ORDER)
