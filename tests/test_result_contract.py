import json

from conftest import LEVELS_RESULT
from lens_pipeline.lens_specs import build_lens_specs
from lens_pipeline.result_contract import check_lens_result, lens_result_schema

SPECS = build_lens_specs()


def test_conforming_result_has_no_problems():
    assert check_lens_result(SPECS["levels"], LEVELS_RESULT) == []


def test_schema_requires_every_expected_key():
    schema = lens_result_schema(SPECS["quadrants"])
    assert schema["required"] == ["UL", "UR", "LL", "LR"]


def test_missing_key_and_bad_bullets_are_reported():
    data = json.loads(LEVELS_RESULT)
    del data["Teal"]
    data["Red"]["bullets"] = "not a list"
    problems = check_lens_result(SPECS["levels"], json.dumps(data))
    assert any("Teal" in p for p in problems)
    assert any(p.startswith("Red/bullets") for p in problems)


def test_non_json_is_reported():
    problems = check_lens_result(SPECS["states"], "Sure! Here is your JSON:")
    assert len(problems) == 1
    assert problems[0].startswith("not valid JSON")
