"""Tests for the batch generator."""

import json
from pathlib import Path

import pytest

from xgenerate.config import Settings
from xgenerate.exceptions import (
    ConfigError,
    TemplatePreprocessorError,
    UnterminatedSectionError,
    XGenerateError,
)
from xgenerate.generator import GenerationResult, Generator, TemplateConfigCombination
from xgenerate.models.enums import GenerationStatus

CONFIG = """<XGenConfig>
  <TextTemplate rootSectionName="Table">
    <FileFormat singleLineCommentPrefix="--"/>
    <Sections>
      <Section name="Column" literalOnFirstLine="varchar" suffix=","/>
    </Sections>
  </TextTemplate>
  <Binding>
    <SectionModelBinding section="Table" modelXPath="/model/table"/>
  </Binding>
</XGenConfig>
"""

TEMPLATE = "CREATE TABLE person (\n    name varchar(100)\n);\n"


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    (tmp_path / "templates").mkdir()
    (tmp_path / "configs").mkdir()
    (tmp_path / "templates" / "table.sql").write_text(TEMPLATE, encoding="utf-8")
    (tmp_path / "configs" / "table.xml").write_text(CONFIG, encoding="utf-8")
    (tmp_path / "configs" / "broken.xml").write_text("<XGenConfig>", encoding="utf-8")
    (tmp_path / "templates" / "open.sql").write_text(
        '-- @XGenSection(name="Block" end="END")\nno end here\n', encoding="utf-8"
    )
    return Settings(
        template_folder=tmp_path / "templates",
        config_folder=tmp_path / "configs",
        output_folder=tmp_path / "out",
    )


class TestTemplateConfigCombination:
    """Tests for parsing template/config combinations."""

    def test_from_string(self) -> None:
        combination = TemplateConfigCombination.from_string("table.sql::table.xml")
        assert combination.template_file_location == "table.sql"
        assert combination.config_file_location == "table.xml"

    @pytest.mark.parametrize("value", ["table.sql", "table.sql::", "a::b::c", "::table.xml"])
    def test_invalid(self, value: str) -> None:
        with pytest.raises(ValueError, match="Invalid template-config combination"):
            TemplateConfigCombination.from_string(value)


class TestGenerationResult:
    """Tests for the per-step result."""

    def test_defaults_to_ok(self) -> None:
        result = GenerationResult(template_file_name="t", config_file_name="c")
        assert result.status == GenerationStatus.OK
        assert result.succeeded

    def test_set_error(self) -> None:
        result = GenerationResult(template_file_name="t", config_file_name="c")
        result.set_error(ConfigError("bad config"))
        assert result.status == GenerationStatus.ERROR
        assert not result.succeeded
        assert str(result.error) == "bad config"


class TestGenerator:
    """Tests for running generation steps."""

    def test_sectionize(self, settings: Settings) -> None:
        generator = Generator(settings)
        result = generator.sectionize(
            settings.template_folder / "table.sql", settings.config_folder / "table.xml"
        )
        assert result.template_name == "table.sql"
        assert [s.section_type for s in result.template_sections] == ["raw", "named", "raw"]

    def test_missing_template(self, settings: Settings) -> None:
        generator = Generator(settings)
        with pytest.raises(XGenerateError, match="Couldn't read the template file"):
            generator.sectionize(
                settings.template_folder / "missing.sql", settings.config_folder / "table.xml"
            )

    def test_run_records_failures(self, settings: Settings) -> None:
        combinations = [
            TemplateConfigCombination.from_string("table.sql::table.xml"),
            TemplateConfigCombination.from_string("table.sql::broken.xml"),
            TemplateConfigCombination.from_string("open.sql::table.xml"),
        ]
        results = Generator(settings).run(combinations)

        assert [r.status for r in results] == [
            GenerationStatus.OK,
            GenerationStatus.ERROR,
            GenerationStatus.ERROR,
        ]
        assert results[0].sectioned_template is not None
        assert isinstance(results[1].error, ConfigError)
        assert isinstance(results[2].error, UnterminatedSectionError)
        assert results[2].config_file_name == "table.xml"

    def test_fail_fast(self, settings: Settings) -> None:
        combinations = [
            TemplateConfigCombination.from_string("table.sql::broken.xml"),
            TemplateConfigCombination.from_string("table.sql::table.xml"),
        ]
        results = Generator(settings).run(combinations, fail_fast=True)
        assert len(results) == 1
        assert not results[0].succeeded

    def test_parallel_run_keeps_order(self, settings: Settings) -> None:
        combinations = [
            TemplateConfigCombination.from_string("table.sql::broken.xml"),
            TemplateConfigCombination.from_string("table.sql::table.xml"),
            TemplateConfigCombination.from_string("table.sql::table.xml"),
        ]
        results = Generator(settings).run(combinations, max_workers=3)

        assert [r.succeeded for r in results] == [False, True, True]
        assert results[1].sectioned_template.to_dict() == results[2].sectioned_template.to_dict()

    def test_undecodable_template_fails_only_its_step(self, settings: Settings) -> None:
        (settings.template_folder / "bad.sql").write_bytes(b"\xff\xfe bad\n")
        combinations = [
            TemplateConfigCombination.from_string("bad.sql::table.xml"),
            TemplateConfigCombination.from_string("table.sql::table.xml"),
        ]
        results = Generator(settings).run(combinations, max_workers=2)

        assert [r.status for r in results] == [GenerationStatus.ERROR, GenerationStatus.OK]
        assert isinstance(results[0].error, TemplatePreprocessorError)
        assert "isn't valid utf-8" in str(results[0].error)

    def test_write_result(self, settings: Settings) -> None:
        generator = Generator(settings)
        (result,) = generator.run([TemplateConfigCombination.from_string("table.sql::table.xml")])

        output_path = generator.write_result(result)

        assert output_path == settings.output_folder / "table.sql.sections.json"
        data = json.loads(output_path.read_text(encoding="utf-8"))
        assert data["type"] == "template"
        assert data["name"] == "Table"
        assert data["end"] == len(TEMPLATE)
        assert data["model_binding"]["section"] == "Table"
        column = data["sections"][1]
        assert column["name"] == "Column"
        assert [s["type"] for s in column["sections"]] == ["raw", "repetition", "raw"]
        assert column["sections"][1]["repetition_style"] == "allButLast"

    def test_write_failed_result(self, settings: Settings) -> None:
        generator = Generator(settings)
        result = GenerationResult(template_file_name="t", config_file_name="c")
        result.set_error(ConfigError("bad config"))
        with pytest.raises(ValueError, match="No sectioned template"):
            generator.write_result(result)
