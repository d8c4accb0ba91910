"""
Unit tests for validate_config.py
"""
import tempfile
from pathlib import Path
from bs_solctra.validate_config import validate_run_config, validate_run_yaml_file


def _valid_data():
    return {
        "resource_path": "resources",
        "particles_file": "particles.txt",
        "output": "results",
        "num_particles": 10,
        "simulation": {
            "steps": 100,
            "step_size": 0.001,
            "write_frequency": 10,
        },
        "device": {
            "major_radius": 0.2381,
            "minor_radius": 0.0944165,
            "permeability": 1.2566e-06,
            "current": -4350.0,
        },
    }


class TestValidateRunConfig:
    """Tests for validate_run_config function."""

    def test_valid_config(self):
        """Test validation of a valid configuration."""
        assert validate_run_config(_valid_data()) == []

    def test_missing_required_fields(self):
        """Test validation with missing required fields."""
        errors = validate_run_config({"output": "results"})
        assert len(errors) == 2
        assert any("Missing required field: resource_path" in e for e in errors)
        assert any("Missing required field: particles_file" in e for e in errors)

    def test_unknown_key(self):
        data = _valid_data()
        data["steps"] = 10
        errors = validate_run_config(data)
        assert any("Unknown key: 'steps'" in e for e in errors)

    def test_forward_extension_fields_accepted(self):
        data = _valid_data()
        data.update({"precision": 5, "length": 1, "mode": 1, "magprof": 0, "phi_angle": 0, "dimension": 1})
        assert validate_run_config(data) == []

    def test_invalid_num_particles(self):
        data = _valid_data()
        data["num_particles"] = 0
        errors = validate_run_config(data)
        assert any("num_particles must be a positive integer" in e for e in errors)

    def test_simulation_not_dict(self):
        data = _valid_data()
        data["simulation"] = "fast"
        errors = validate_run_config(data)
        assert any("simulation must be a dictionary" in e for e in errors)

    def test_float_steps(self):
        data = _valid_data()
        data["simulation"]["steps"] = 100.0
        errors = validate_run_config(data)
        assert any("simulation.steps should be an integer, not a float" in e for e in errors)

    def test_invalid_step_size_and_frequency(self):
        data = _valid_data()
        data["simulation"]["step_size"] = -0.1
        data["simulation"]["write_frequency"] = 0
        errors = validate_run_config(data)
        assert any("simulation.step_size must be a positive number" in e for e in errors)
        assert any("simulation.write_frequency must be a positive integer" in e for e in errors)

    def test_unknown_simulation_key(self):
        data = _valid_data()
        data["simulation"]["adaptive"] = True
        errors = validate_run_config(data)
        assert any("Unknown simulation key: 'adaptive'" in e for e in errors)

    def test_invalid_device(self):
        data = _valid_data()
        data["device"]["minor_radius"] = -1.0
        data["device"]["current"] = "high"
        data["device"]["coils"] = 18
        errors = validate_run_config(data)
        assert any("device.minor_radius must be positive" in e for e in errors)
        assert any("device.current must be a number" in e for e in errors)
        assert any("Unknown device key: 'coils'" in e for e in errors)

    def test_negative_current_allowed(self):
        data = _valid_data()
        data["device"]["current"] = -1.0
        assert validate_run_config(data) == []

    def test_file_prefix(self):
        errors = validate_run_config({}, Path("run.yaml"))
        assert all(e.startswith("run.yaml: ") for e in errors)


class TestValidateRunYamlFile:
    """Tests for validate_run_yaml_file function."""

    def test_valid_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "run.yaml"
            path.write_text(
                "resource_path: resources\n"
                "particles_file: particles.txt\n"
                "output: results\n"
                "simulation:\n"
                "  steps: 10\n"
            )
            assert validate_run_yaml_file(path) == []

    def test_empty_file(self, tmp_path):
        path = tmp_path / "run.yaml"
        path.write_text("")
        errors = validate_run_yaml_file(path)
        assert "File is empty" in errors[0]

    def test_root_not_dict(self, tmp_path):
        path = tmp_path / "run.yaml"
        path.write_text("- a\n- b\n")
        errors = validate_run_yaml_file(path)
        assert "Root element must be a dictionary" in errors[0]

    def test_yaml_error(self, tmp_path):
        path = tmp_path / "run.yaml"
        path.write_text("resource_path: [unclosed\n")
        errors = validate_run_yaml_file(path)
        assert "YAML parsing error" in errors[0]

    def test_missing_file(self, tmp_path):
        errors = validate_run_yaml_file(tmp_path / "missing.yaml")
        assert "Error reading file" in errors[0]
