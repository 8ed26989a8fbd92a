import pytest

from distractor_service.core.data_models import DegenerateCode
from distractor_service.core.exceptions import InvalidInputError
from distractor_service.simulation.personas import (
    PersonaEstimate,
    allocate_samples,
    normalize_or_default,
    parse_persona_estimates,
    resolve_personas,
    uniform_probs,
)

LABELS = ["A", "B", "C", "D"]


class TestNormalizeOrDefault:
    def test_none_gives_uniform(self) -> None:
        assert normalize_or_default(None, LABELS) == uniform_probs(LABELS)

    def test_empty_mapping_gives_uniform(self) -> None:
        assert normalize_or_default({}, LABELS) == uniform_probs(LABELS)

    def test_non_mapping_gives_uniform(self) -> None:
        assert normalize_or_default([0.5, 0.5], LABELS) == uniform_probs(
            LABELS
        )

    def test_rescales_to_one(self) -> None:
        result = normalize_or_default({"A": 2, "B": 1, "C": 1}, LABELS)
        assert result == pytest.approx(
            {"A": 0.5, "B": 0.25, "C": 0.25, "D": 0.0}
        )

    def test_unusable_values_count_as_zero(self) -> None:
        result = normalize_or_default(
            {"A": "high", "B": -1, "C": float("nan"), "D": True, "E": 5},
            LABELS,
        )
        assert result == {"A": 0.0, "B": 0.0, "C": 0.0, "D": 0.0}

    def test_numeric_strings_are_read(self) -> None:
        result = normalize_or_default({"A": "0.75", "B": "0.25"}, LABELS)
        assert result["A"] == pytest.approx(0.75)
        assert result["B"] == pytest.approx(0.25)


class TestParsePersonaEstimates:
    def test_wrapped_payload(self) -> None:
        payload = {"personas": [{"name": "Expert", "probs": {"A": 0.9}}]}
        assert parse_persona_estimates(payload) == [
            PersonaEstimate(name="Expert", probs={"A": 0.9})
        ]

    def test_bare_list(self) -> None:
        estimates = parse_persona_estimates([{"name": " Weak "}])
        assert estimates == [PersonaEstimate(name="Weak", probs=None)]

    def test_skips_malformed_entries(self) -> None:
        estimates = parse_persona_estimates(
            [{"probs": {"A": 1}}, "Expert", {"name": ""}, {"name": "Novice"}]
        )
        assert [e.name for e in estimates] == ["Novice"]

    def test_invalid_shape_raises(self) -> None:
        with pytest.raises(InvalidInputError):
            parse_persona_estimates({"items": []})

    def test_string_payload_raises(self) -> None:
        with pytest.raises(InvalidInputError):
            parse_persona_estimates("Expert")


class TestResolvePersonas:
    def test_missing_estimate_falls_back_to_uniform(self) -> None:
        personas, warnings = resolve_personas(
            ["Expert", "Weak"],
            [PersonaEstimate(name="Expert", probs={"A": 1.0})],
            LABELS,
        )
        assert [p.name for p in personas] == ["Expert", "Weak"]
        assert personas[0].probs["A"] == pytest.approx(1.0)
        assert dict(personas[1].probs) == uniform_probs(LABELS)
        assert [(w.code, w.persona) for w in warnings] == [
            (DegenerateCode.UNIFORM_FALLBACK_PERSONA, "Weak")
        ]

    def test_unusable_estimate_falls_back_to_uniform(self) -> None:
        personas, warnings = resolve_personas(
            ["Expert"],
            [PersonaEstimate(name="Expert", probs=[0.9, 0.1])],
            LABELS,
        )
        assert dict(personas[0].probs) == uniform_probs(LABELS)
        assert warnings[0].code == DegenerateCode.UNIFORM_FALLBACK_PERSONA
        assert "unusable" in warnings[0].message

    def test_unknown_estimates_ignored(self) -> None:
        personas, warnings = resolve_personas(
            ["Expert"],
            [PersonaEstimate(name="Ghost", probs={"B": 1.0})],
            LABELS,
        )
        assert len(personas) == 1
        assert dict(personas[0].probs) == uniform_probs(LABELS)
        assert {(w.code, w.persona) for w in warnings} == {
            (DegenerateCode.UNKNOWN_PERSONA_ESTIMATE, "Ghost"),
            (DegenerateCode.UNIFORM_FALLBACK_PERSONA, "Expert"),
        }

    def test_complete_estimates_have_no_warnings(self) -> None:
        _, warnings = resolve_personas(
            ["Expert", "Weak"],
            [
                PersonaEstimate(name="Expert", probs={"A": 0.9, "B": 0.1}),
                PersonaEstimate(name="Weak", probs={"B": 1.0}),
            ],
            LABELS,
        )
        assert warnings == []

    def test_first_estimate_wins(self) -> None:
        personas, _ = resolve_personas(
            ["Expert"],
            [
                PersonaEstimate(name="Expert", probs={"A": 1.0}),
                PersonaEstimate(name="Expert", probs={"B": 1.0}),
            ],
            LABELS,
        )
        assert personas[0].probs["A"] == pytest.approx(1.0)

    def test_duplicate_names_raise(self) -> None:
        with pytest.raises(InvalidInputError, match="unique"):
            resolve_personas(["Expert", "Expert"], [], LABELS)


class TestAllocateSamples:
    def test_proportional(self) -> None:
        assert allocate_samples(100, [1, 3]) == [25, 75]

    def test_remainder_goes_to_first_personas(self) -> None:
        assert allocate_samples(10, [1, 1, 1]) == [4, 3, 3]

    def test_always_sums_to_total(self) -> None:
        weights = [5, 20, 40, 20, 10, 5]
        for total in (0, 1, 7, 1199, 1200):
            assert sum(allocate_samples(total, weights)) == total

    def test_all_zero_weights_split_equally(self) -> None:
        assert allocate_samples(9, [0, 0, 0]) == [3, 3, 3]

    def test_negative_weight_counts_as_zero(self) -> None:
        assert allocate_samples(10, [-5, 1]) == [0, 10]

    def test_empty_weights(self) -> None:
        assert allocate_samples(10, []) == []

    def test_negative_total_raises(self) -> None:
        with pytest.raises(InvalidInputError):
            allocate_samples(-1, [1.0])
