import pytest

from evospecies.exceptions import InvariantViolation
from evospecies.speciation.config import SpeciationConfig
from evospecies.speciation.species import (
    STAGNATION_PENALTY,
    ZERO_FITNESS_SUBSTITUTE,
    Species,
)
from helpers import Creature, creatures


def make_species(group="a", *fitness, species_id=0, generations=20):
    members = creatures(group, *fitness)
    species = Species(members[0], species_id)
    for member in members[1:]:
        species.insert(member)
    species.age.generations = generations
    return species


@pytest.fixture
def age_conf():
    return SpeciationConfig(
        young_age_threshold=10,
        old_age_threshold=40,
        species_max_stagnation=400,
        young_age_fitness_boost=1.1,
        old_age_fitness_penalty=0.9,
    )


def test_new_species_is_a_singleton():
    founder = Creature("a", 1.0)
    species = Species(founder, 7)
    assert species.id == 7
    assert len(species) == 1
    assert species.representative is founder
    assert species.last_best_fitness == 0.0
    assert species.age.generations == 0


def test_insert_appends_and_keeps_representative():
    species = make_species("a", 1.0, 2.0, 3.0)
    newcomer = Creature("a", 9.0)
    species.insert(newcomer)
    assert species.individuals[-1] is newcomer
    assert species.representative.name == "a0"


def test_compatibility_uses_representative():
    species = make_species("a", 1.0)
    assert species.is_compatible(Creature("a"))
    assert not species.is_compatible(Creature("b"))


def test_empty_species_is_never_compatible():
    species = make_species("a", 1.0)
    drained = species.drain_individuals()
    assert len(drained) == 1
    assert species.is_empty()
    assert species.representative is None
    assert not species.is_compatible(Creature("a"))


def test_best_individual_first_occurrence_wins_ties():
    species = make_species("a", 3.0, 5.0, 5.0)
    assert species.get_best_individual().name == "a1"
    assert species.get_best_fitness() == 5.0


def test_best_individual_ignores_unevaluated_members():
    species = make_species("a", None, 2.0, None)
    assert species.get_best_individual().name == "a1"
    assert make_species("a", None, None).get_best_fitness() is None


@pytest.mark.parametrize(
    "generations, expected",
    [(5, 2.0 * 1.1), (20, 2.0), (40, 2.0), (50, 2.0 * 0.9)],
)
def test_age_boost_and_penalty(age_conf, generations, expected):
    species = make_species("a", 2.0, generations=generations)
    species.compute_adjust_fitness(False, age_conf)
    assert species.accumulated_adjusted_fitness() == pytest.approx(expected)


def test_stagnating_species_is_penalized_unless_best(age_conf):
    for is_best, expected in [(False, 2.0 * STAGNATION_PENALTY), (True, 2.0)]:
        species = make_species("a", 2.0, generations=20)
        species.last_best_fitness = 10.0
        species.age.no_improvements = 401
        species.compute_adjust_fitness(is_best, age_conf)
        assert species.accumulated_adjusted_fitness() == pytest.approx(expected)
        assert species.age.no_improvements == 401


def test_stagnation_threshold_is_exclusive(age_conf):
    species = make_species("a", 2.0, generations=20)
    species.last_best_fitness = 10.0
    species.age.no_improvements = 400
    species.compute_adjust_fitness(False, age_conf)
    assert species.accumulated_adjusted_fitness() == pytest.approx(2.0)


def test_fitness_sharing_divides_by_size(conf):
    species = make_species("a", 4.0, 2.0)
    species.compute_adjust_fitness(False, conf)
    assert species.adjusted_fitness_values() == [2.0, 1.0]
    assert species.accumulated_adjusted_fitness() == 3.0


def test_zero_fitness_gets_a_small_substitute(conf):
    species = make_species("a", 0.0, 0.0)
    species.compute_adjust_fitness(False, conf)
    assert species.adjusted_fitness_values() == [
        pytest.approx(ZERO_FITNESS_SUBSTITUTE / 2),
        pytest.approx(ZERO_FITNESS_SUBSTITUTE / 2),
    ]


def test_new_best_fitness_resets_stagnation(conf):
    species = make_species("a", 4.0, 2.0)
    species.age.no_improvements = 7
    species.compute_adjust_fitness(False, conf)
    assert species.last_best_fitness == 4.0
    assert species.age.no_improvements == 0


def test_lower_fitness_keeps_watermark(conf):
    species = make_species("a", 4.0)
    species.last_best_fitness = 6.0
    species.age.no_improvements = 3
    species.compute_adjust_fitness(False, conf)
    assert species.last_best_fitness == 6.0
    assert species.age.no_improvements == 3


def test_adjusted_fitness_is_idempotent(age_conf):
    species = make_species("a", 1.0, 8.0, 3.0, generations=5)
    species.age.no_improvements = 500
    species.last_best_fitness = 5.0
    species.compute_adjust_fitness(False, age_conf)
    first = species.adjusted_fitness_values()
    species.compute_adjust_fitness(False, age_conf)
    assert species.adjusted_fitness_values() == first


def test_negative_fitness_is_fatal_and_changes_nothing(conf):
    species = make_species("a", 5.0, -1.0)
    species.age.no_improvements = 3
    with pytest.raises(InvariantViolation, match="negative"):
        species.compute_adjust_fitness(False, conf)
    assert species.adjusted_fitness_values() == [None, None]
    assert species.last_best_fitness == 0.0
    assert species.age.no_improvements == 3


def test_unevaluated_member_is_fatal(conf):
    species = make_species("a", 5.0, None)
    with pytest.raises(InvariantViolation, match="not evaluated"):
        species.compute_adjust_fitness(False, conf)


def test_accumulated_fitness_requires_adjustment(conf):
    species = make_species("a", 5.0)
    with pytest.raises(InvariantViolation):
        species.accumulated_adjusted_fitness()


def test_set_individuals_clears_adjusted_fitness(conf):
    species = make_species("a", 5.0)
    species.compute_adjust_fitness(False, conf)
    species.set_individuals(creatures("a", 1.0, 2.0))
    assert len(species) == 2
    assert species.adjusted_fitness_values() == [None, None]


def test_clone_with_new_individuals_copies_age():
    species = make_species("a", 5.0, species_id=4, generations=3)
    species.last_best_fitness = 5.0
    clone = species.clone_with_new_individuals(creatures("a", 1.0))
    assert clone.id == 4
    assert clone.last_best_fitness == 5.0
    assert clone.age.generations == 3
    clone.increase_generations()
    assert species.age.generations == 3
    assert [c.name for c in clone] == ["a0"]
    assert len(species) == 1


def test_age_forwarders():
    species = make_species("a", 1.0, generations=0)
    species.increase_generations()
    species.increase_no_improvements_generations()
    species.increase_no_improvements_generations()
    assert (species.age.generations, species.age.no_improvements) == (1, 2)
    species.reset_age()
    assert (species.age.generations, species.age.no_improvements) == (0, 0)
