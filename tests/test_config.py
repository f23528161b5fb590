from argparse import Namespace

import pytest
from pydantic import ValidationError

from gridcrawler.commands.common import validated
from gridcrawler.config.load import apply_params_defaults, load_grid, load_params_file
from gridcrawler.config.schema import SchedulingParams, SearchOptions
from gridcrawler.errors import InvalidOption, IOFailure


class TestSearchOptions:
    def test_output_type_endings(self, outdir):
        assert SearchOptions(outdata_dir=outdir).outfile_ending == ".bcf.gz"
        assert SearchOptions(outdata_dir=outdir, output_type="z").outfile_ending == ".vcf.gz"

    def test_unknown_output_type_rejected(self, outdir):
        with pytest.raises(ValidationError):
            SearchOptions(outdata_dir=outdir, output_type="x")

    def test_frozen(self, outdir):
        opts = SearchOptions(outdata_dir=outdir)
        with pytest.raises(ValidationError):
            opts.output_type = "z"


class TestSchedulingParams:
    def test_defaults(self):
        p = SchedulingParams()
        assert p.core_processor_number == 16
        assert p.slurm_quality_of_service == "low"
        assert p.email_type == "F"
        assert p.process_time == 1
        assert p.pipefail and p.error_trap and p.xargs

    def test_env_commands_get_terminator(self):
        p = SchedulingParams(source_environment_commands=["source", "activate", "bcf"])
        assert p.source_environment_commands == ["source", "activate", "bcf", ";"]

    def test_env_commands_already_terminated(self):
        p = SchedulingParams(source_environment_commands=["source", "activate", "bcf;"])
        assert p.source_environment_commands == ["source", "activate", "bcf;"]

    @pytest.mark.parametrize("email", ["henrik@example.se", "first.last@lab.scilifelab.se"])
    def test_valid_email(self, email):
        assert SchedulingParams(email=email).email == email

    @pytest.mark.parametrize("email", ["not-an-email", "a@b", "user@host."])
    def test_malformed_email(self, email):
        with pytest.raises(ValidationError):
            SchedulingParams(email=email)

    def test_email_type_letters(self):
        assert SchedulingParams(email_type="bef").email_type == "BEF"
        with pytest.raises(ValidationError):
            SchedulingParams(email_type="X")

    def test_qos_choices(self):
        with pytest.raises(ValidationError):
            SchedulingParams(slurm_quality_of_service="urgent")

    def test_core_number_positive(self):
        with pytest.raises(ValidationError):
            SchedulingParams(core_processor_number=0)

    def test_validated_wraps_errors(self):
        with pytest.raises(InvalidOption, match="slurm_quality_of_service"):
            validated(SchedulingParams, slurm_quality_of_service="urgent")


class TestLoadGrid:
    def test_values_and_numeric_keys_are_strings(self, tmp_path):
        f = tmp_path / "grid.yaml"
        f.write_text("1001: /data/a.vcf.gz\nADM1: /data/b.bcf\n", encoding="utf-8")
        grid = load_grid(f)
        assert dict(grid) == {"1001": "/data/a.vcf.gz", "ADM1": "/data/b.bcf"}

    def test_read_only(self, tmp_path):
        f = tmp_path / "grid.yaml"
        f.write_text("s1: a.vcf\n", encoding="utf-8")
        grid = load_grid(f)
        with pytest.raises(TypeError):
            grid["s2"] = "b.vcf"

    def test_missing_file(self, tmp_path):
        with pytest.raises(IOFailure):
            load_grid(tmp_path / "nope.yaml")

    def test_not_a_mapping(self, tmp_path):
        f = tmp_path / "grid.yaml"
        f.write_text("- a.vcf\n- b.vcf\n", encoding="utf-8")
        with pytest.raises(InvalidOption):
            load_grid(f)


class TestParamsFile:
    def test_cli_wins_over_params(self, tmp_path):
        f = tmp_path / "params.yaml"
        f.write_text("core-processor-number: 4\noutput_type: z\npositions: 1 2\n", encoding="utf-8")
        args = Namespace(core_processor_number=16, output_type="b", positions=None)
        # core_processor_number differs from its default, so the CLI value stays
        apply_params_defaults(args, load_params_file(f), {"core_processor_number": 8, "output_type": "b", "positions": None})
        assert args.core_processor_number == 16
        assert args.output_type == "z"
        assert args.positions == ["1", "2"]

    def test_no_params_file(self):
        assert load_params_file(None) == {}


class TestParamsNormalization:
    DEFAULTS = {"sample_ids": None, "positions": None, "dry_run": False}

    def test_scalar_list_option_becomes_list(self):
        args = Namespace(sample_ids=None, positions=None)
        apply_params_defaults(args, {"sample_ids": 1001, "positions": "1:5-9"}, self.DEFAULTS)
        assert args.sample_ids == ["1001"]
        assert args.positions == ["1:5-9"]

    def test_command_line_only_keys_are_ignored_with_warning(self, caplog):
        args = Namespace(log_file=None, dry_run=False)
        with caplog.at_level("WARNING"):
            apply_params_defaults(args, {"log_file": "x.log", "dry_run": True}, self.DEFAULTS)
        assert args.log_file is None
        assert args.dry_run is True
        assert "log_file can only be set on the command line" in caplog.text
