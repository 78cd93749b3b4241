"""
Tests for ExtrasPipeline

These tests verify config loading, wiring and the exit code translation.
"""
import json
from pathlib import Path

import pytest

from protoc_extras import config
from protoc_extras.pipeline import ExtrasPipeline, PipelineError, main
from protoc_extras.schemas import ExtrasConfig, RunStatus, TaskStatus, load_extras_config

from fakes import RecordingExecutor, FakeArtifactResolver


class TestExtrasPipeline:
    """Test suite for ExtrasPipeline"""

    @pytest.fixture
    def config_file(self, temp_dir):
        path = temp_dir / "protoc-extras.json"
        path.write_text(json.dumps({
            "outputBaseDirectory": "target/generated-sources/protobuf",
            "failFast": False,
            "extraPlugins": [
                {"pluginId": "grpc", "pluginArtifact": "g:a:v", "pluginParameter": "lite"},
                {"pluginId": "doc", "pluginExecutable": "tools/protoc-gen-doc"},
            ],
        }))
        return path

    def make_pipeline(self, temp_dir, executor, **kwargs):
        return ExtrasPipeline(
            base_dir=temp_dir,
            process_executor=executor,
            artifact_resolver=FakeArtifactResolver({"g:a:v": Path("/opt/plugins/protoc-gen-grpc")}),
            **kwargs
        )

    def test_load_extras_config(self, config_file):
        extras_config = load_extras_config(config_file)
        assert extras_config.fail_fast is False
        assert extras_config.output_base_directory == Path("target/generated-sources/protobuf")
        assert [p.id for p in extras_config.extra_plugins] == ["grpc", "doc"]

    def test_run_from_config_file(self, temp_dir, config_file, executor):
        pipeline = self.make_pipeline(temp_dir, executor, config_path=config_file)

        outcome = pipeline.run()

        assert outcome["status"] == "success"
        assert outcome["exit_code"] == 0
        assert outcome["result"].status == RunStatus.ALL_SUCCEEDED
        grpc, doc = executor.calls
        assert grpc.resolved_output_directory == temp_dir / "target/generated-sources/protobuf/grpc"
        assert grpc.parameter == "lite"
        assert doc.resolved_executable == temp_dir / "tools/protoc-gen-doc"
        assert pipeline.execution_log == outcome["execution_log"]
        assert pipeline.execution_log

    def test_partial_failure_exit_code(self, temp_dir, config_file):
        executor = RecordingExecutor(exit_codes={"grpc": 1})
        pipeline = self.make_pipeline(temp_dir, executor, config_path=config_file)

        outcome = pipeline.run()

        assert outcome["status"] == "error"
        assert outcome["exit_code"] == 1
        assert [o.status for o in outcome["result"].outcomes] == [TaskStatus.FAILED, TaskStatus.COMPLETED]

    def test_no_extra_plugins(self, temp_dir, executor):
        pipeline = self.make_pipeline(temp_dir, executor, extras_config=ExtrasConfig())

        outcome = pipeline.run()

        assert outcome["exit_code"] == 0
        assert outcome["result"].nothing_to_do
        assert outcome["summary"] == "No extra plugins to execute."
        assert executor.calls == []

    def test_duplicate_ids_are_pipeline_errors(self, temp_dir, executor):
        extras_config = ExtrasConfig.model_validate({
            "extraPlugins": [{"pluginId": "a"}, {"pluginId": "a"}],
        })
        pipeline = self.make_pipeline(temp_dir, executor, extras_config=extras_config)

        with pytest.raises(PipelineError):
            pipeline.run()

    def test_missing_config_file(self, temp_dir, executor):
        pipeline = self.make_pipeline(temp_dir, executor, config_path=temp_dir / "nope.json")
        with pytest.raises(PipelineError):
            pipeline.run()

    def test_main_reports_configuration_error(self, temp_dir):
        assert main([str(temp_dir / "nope.json")]) == 2

    def test_malformed_toolchains_file_is_a_pipeline_error(self, temp_dir, executor, monkeypatch):
        toolchains = temp_dir / "toolchains.json"
        toolchains.write_text("{not json")
        monkeypatch.setattr(config, "TOOLCHAINS_FILE", toolchains)

        with pytest.raises(PipelineError) as exc_info:
            self.make_pipeline(temp_dir, executor, extras_config=ExtrasConfig())
        assert "toolchains.json" in str(exc_info.value)

    def test_main_reports_malformed_toolchains_file(self, temp_dir, config_file, monkeypatch):
        toolchains = temp_dir / "toolchains.json"
        toolchains.write_text("{not json")
        monkeypatch.setattr(config, "TOOLCHAINS_FILE", toolchains)

        assert main([str(config_file)]) == 2

    def test_main_reports_missing_toolchains_file(self, temp_dir, config_file, monkeypatch):
        monkeypatch.setattr(config, "TOOLCHAINS_FILE", temp_dir / "absent-toolchains.json")

        assert main([str(config_file)]) == 2
