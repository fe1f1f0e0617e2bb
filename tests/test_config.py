import pytest
import yaml

from fem_kernel.core.config import AnalysisContext, ElementConfig, KernelConfig
from fem_kernel.elements import (
    HEXA8,
    QUAD4,
    TRIA1,
    ElementFactory,
    check_consistent_dimension,
)


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "kernel.yaml"
    path.write_text(
        yaml.dump({"analysis": {"n_dim": 3, "nonlinear": True}, "elements": {"kind": "HEXA8"}})
    )
    return path


class TestAnalysisContext:
    def test_defaults(self):
        context = AnalysisContext()
        assert context.n_dim == 2
        assert context.nonlinear is False

    @pytest.mark.parametrize("n_dim", [0, 1, 4])
    def test_invalid_dimension(self, n_dim):
        with pytest.raises(ValueError):
            AnalysisContext(n_dim=n_dim)

    def test_is_immutable(self):
        context = AnalysisContext(n_dim=2)
        with pytest.raises(AttributeError):
            context.n_dim = 3


class TestKernelConfig:
    def test_from_yaml(self, config_file):
        config = KernelConfig.from_yaml(config_file)
        assert config.analysis == AnalysisContext(n_dim=3, nonlinear=True)
        assert config.elements.kind == "HEXA8"
        assert config.validate() == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            KernelConfig.from_yaml(tmp_path / "missing.yaml")

    def test_from_dict_defaults(self):
        config = KernelConfig.from_dict({})
        assert config.analysis.n_dim == 2
        assert config.elements.kind == "QUAD4"

    def test_save_and_reload(self, config_file, tmp_path):
        config = KernelConfig.from_yaml(config_file)
        out = tmp_path / "saved.yaml"
        config.save_yaml(out)
        assert KernelConfig.from_yaml(out).to_dict() == config.to_dict()

    def test_invalid_kind(self):
        with pytest.raises(ValueError):
            ElementConfig(kind="TRIA6")

    def test_validate_reports_dimension_mismatch(self):
        config = KernelConfig.from_dict({"analysis": {"n_dim": 3}, "elements": {"kind": "TRIA1"}})
        assert config.validate() == ["TRIA1 requires n_dim = 2"]

    def test_str(self):
        assert "QUAD4" in str(KernelConfig())


class TestElementFactory:
    @pytest.mark.parametrize(
        "kind, n_dim, expected",
        [("TRIA1", 2, TRIA1), ("QUAD4", 2, QUAD4), ("HEXA8", 3, HEXA8)],
    )
    def test_get_element(self, kind, n_dim, expected):
        element = ElementFactory.get_element(kind, AnalysisContext(n_dim=n_dim), element_id=3)
        assert isinstance(element, expected)
        assert element.id == 3
        assert element.name == kind

    def test_from_config(self, config_file):
        element = ElementFactory.from_config(KernelConfig.from_yaml(config_file))
        assert isinstance(element, HEXA8)
        assert element.n_dim == 3

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            ElementFactory.get_element("PENTA6", AnalysisContext(n_dim=3))

    def test_dimension_mismatch(self):
        with pytest.raises(ValueError):
            ElementFactory.get_element("QUAD4", AnalysisContext(n_dim=3))


class TestConsistentDimension:
    def test_shared_dimension(self):
        context = AnalysisContext(n_dim=2)
        elements = [TRIA1(context), QUAD4(context), QUAD4(AnalysisContext(n_dim=2))]
        assert check_consistent_dimension(elements) == 2

    def test_mixed_dimensions(self):
        elements = [TRIA1(AnalysisContext(n_dim=2)), HEXA8(AnalysisContext(n_dim=3))]
        with pytest.raises(ValueError):
            check_consistent_dimension(elements)

    def test_no_elements(self):
        with pytest.raises(ValueError):
            check_consistent_dimension([])
