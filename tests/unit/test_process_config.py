from __future__ import annotations

import pytest

from merge_splitter.models.process_config import MAX_COLUMN, ProcessConfig, ProcessType


@pytest.mark.parametrize(
    "ptype, weight, box, images",
    [
        (ProcessType.SEA_RAIL_WITH_IMAGE, 13, 11, True),
        (ProcessType.SEA_RAIL_NO_IMAGE, 13, 11, False),
        (ProcessType.AIR_FREIGHT, 15, 13, True),
    ],
)
def test_defaults_per_type(ptype, weight, box, images):
    cfg = ProcessConfig.default_for_type(ptype)
    assert (cfg.weight_column, cfg.box_column, cfg.copy_images) == (weight, box, images)
    assert cfg.quantity_column == weight - 1
    assert cfg.validation_errors() == []


def test_parse_accepts_identifier_and_member():
    assert ProcessType.parse(" Air-Freight ") is ProcessType.AIR_FREIGHT
    assert ProcessType.parse(ProcessType.SEA_RAIL_NO_IMAGE) is ProcessType.SEA_RAIL_NO_IMAGE


def test_parse_unknown_type_lists_known_ones():
    with pytest.raises(ValueError) as e:
        ProcessType.parse("truck")
    assert "unknown process type" in str(e.value)
    assert "air-freight" in str(e.value)


@pytest.mark.parametrize(
    "weight, box, fragment",
    [
        (1, 5, "weight_column must be >= 2"),
        (7, 7, "must differ"),
        (0, 3, "between 1 and"),
        (MAX_COLUMN + 1, 3, "between 1 and"),
        ("13", 11, "must be an integer"),
        (True, 11, "must be an integer"),
    ],
)
def test_validation_errors(weight, box, fragment):
    cfg = ProcessConfig(ProcessType.AIR_FREIGHT, weight_column=weight, box_column=box)
    errors = cfg.validation_errors()
    assert errors
    assert any(fragment in e for e in errors)


def test_to_mapping_is_yaml_ready():
    cfg = ProcessConfig.default_for_type("air-freight")
    assert cfg.to_mapping() == {"weight_column": 15, "box_column": 13, "copy_images": True}
