import json

import pytest
import yaml

from msclust.cluster.assigner import IndexedClusterAssigner, NaiveClusterAssigner
from msclust.util.config import Configurable


def test_defaults():
    assigner = IndexedClusterAssigner()
    assert assigner.bucket_width == assigner.similarity.peak_tolerance == 0.02
    assert assigner.num_indexed_peaks == 5


def test_partial_override_keeps_defaults():
    assigner = NaiveClusterAssigner({"similarity_threshold": 0.9})
    assert assigner.similarity.similarity_threshold == 0.9
    assert assigner.similarity.precursor_mass_window == 2.0
    assert assigner.get_configs(deep=False)["peak_tolerance"] == 0.02


def test_config_files(tmp_path):
    yaml_file = tmp_path / "params.yaml"
    yaml_file.write_text(yaml.safe_dump({"peak_tolerance": 0.05, "num_indexed_peaks": 3}))
    json_file = tmp_path / "params.json"
    json_file.write_text(json.dumps({"bucket_width": 0.1, "precursor_mass_window": 1}))

    from_yaml = IndexedClusterAssigner(str(yaml_file))
    assert from_yaml.similarity.peak_tolerance == 0.05
    assert from_yaml.bucket_width == 0.05
    assert from_yaml.num_indexed_peaks == 3

    from_json = IndexedClusterAssigner(str(json_file))
    assert from_json.bucket_width == 0.1
    assert from_json.similarity.precursor_mass_window == 1.0
    assert from_json.similarity.peak_tolerance == 0.02


@pytest.mark.parametrize(
    "configs",
    [{"num_indexed_peaks": 0}, {"bucket_width": -0.5}, {"peak_tolerance": "abc"}],
)
def test_invalid_configs(configs):
    with pytest.raises((ValueError, TypeError)):
        IndexedClusterAssigner(configs)


def test_nested_configs_merge():
    c = Configurable({"a": {"y": 3}}, defaults={"a": {"x": 1, "y": 2}, "b": 4})
    assert c.get_config("a", "x") == 1
    assert c.get_config("a", "y") == 3
    assert c.get_config("b", typed=int) == 4
    assert c.get_config("c", required=False) is None
    with pytest.raises(KeyError):
        c.get_config("c")
    with pytest.raises(TypeError):
        c.get_config("b", typed=str)
