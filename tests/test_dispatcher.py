import itertools

import pytest

import dispatcher
from simulation import ElevatorState, PickupRequest


def fleet_of(*pairs):
    return tuple(ElevatorState.of(floor, stops) for floor, stops in pairs)


EXAMPLE_FLEET = fleet_of((1, ()), (2, {0}), (7, {4}), (2, {3, 4}))


@pytest.mark.parametrize(
    "request_, expected",
    [
        (PickupRequest(2, 0), 1),
        (PickupRequest(1, 0), 0),
        (PickupRequest(2, 4), 3),
        (PickupRequest(5, 4), 2),
    ],
)
def test_search_returns_closest_on_way_elevator(request_, expected):
    assert dispatcher.search(EXAMPLE_FLEET, request_) == expected


def test_search_breaks_ties_by_lowest_index():
    fleet = fleet_of((3, ()), (5, ()), (5, ()))
    assert dispatcher.search(fleet, PickupRequest(4, 8)) == 0
    assert dispatcher.search(fleet, PickupRequest(6, 8)) == 1


def test_search_returns_none_without_candidates():
    fleet = fleet_of((1, {10}), (20, {30}))
    assert dispatcher.candidates(fleet, PickupRequest(12, 9)) == []
    assert dispatcher.search(fleet, PickupRequest(12, 9)) is None


def test_search_skips_elevators_on_a_pickup_leg():
    fleet = (ElevatorState.of(10).add_stops(12, 9), ElevatorState.of(30))
    assert dispatcher.search(fleet, PickupRequest(11, 15)) == 1


def test_search_picks_a_minimal_candidate():
    floors = range(0, 5)
    shapes = [(), {0}, {4}, {1, 3}]
    one_leg = [
        (floor, stops)
        for floor in floors
        for stops in shapes
        if all(stop > floor for stop in stops) or all(stop < floor for stop in stops)
    ]
    fleets = [fleet_of(*combo) for combo in itertools.product(one_leg, repeat=2)]
    for fleet in fleets:
        for origin, destination in itertools.product(floors, floors):
            request = PickupRequest(origin, destination)
            index = dispatcher.search(fleet, request)
            eligible = dispatcher.candidates(fleet, request)
            if index is None:
                assert eligible == []
                continue
            assert fleet[index].is_on_way(origin, destination)
            best = min(fleet[i].distance_from(origin) for i in eligible)
            assert fleet[index].distance_from(origin) == best
            assert index == min(i for i in eligible if fleet[i].distance_from(origin) == best)


def test_step_moves_whole_fleet():
    fleet = fleet_of((2, {0}), (7, {6}), (2, {3, 4}))
    assert dispatcher.step(fleet) == fleet_of((1, {0}), (6, ()), (3, {4}))


def test_step_keeps_idle_fleet():
    fleet = fleet_of((1, ()), (2, ()))
    assert dispatcher.step(fleet) == fleet


def test_assign_adds_stops_to_one_elevator():
    fleet = fleet_of((1, ()), (6, {10, 13, 14}))
    updated = dispatcher.assign(fleet, 1, PickupRequest(7, 15))
    assert updated == fleet_of((1, ()), (6, {7, 10, 13, 14, 15}))
    assert fleet == fleet_of((1, ()), (6, {10, 13, 14}))


def test_get_search():
    assert dispatcher.get_search("Nearest") is dispatcher.search
    with pytest.raises(ValueError):
        dispatcher.get_search("scan")
