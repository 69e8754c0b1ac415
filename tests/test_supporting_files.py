"""Tests for the selection of templates rendered for a run."""

from pathlib import PurePosixPath

from csharp_oas_generator.config import GeneratorConfig
from csharp_oas_generator.generator.supporting_files import (
    api_folders,
    api_template_files,
    collect_supporting_files,
    model_folders,
    model_template_files,
)
from csharp_oas_generator.parser.models import ParsedSpec


def empty_spec(*, http_signature: bool = False) -> ParsedSpec:
    return ParsedSpec(
        info={"title": "t", "version": "1"},
        servers=[],
        models={},
        operations=[],
        has_http_signature_methods=http_signature,
    )


def destinations(config: GeneratorConfig, spec: ParsedSpec) -> list[str]:
    return [str(f.relative_path) for f in collect_supporting_files(config, spec)]


class TestCollectSupportingFiles:
    def test_restsharp_defaults(self) -> None:
        files = destinations(GeneratorConfig(), empty_spec())

        assert "src/Org.OpenAPITools/Client/ApiClient.cs" in files
        assert "src/Org.OpenAPITools/Client/HttpMethod.cs" in files
        assert "src/Org.OpenAPITools/Client/IAsynchronousClient.cs" in files
        assert "src/Org.OpenAPITools/Client/RetryConfiguration.cs" in files
        assert "src/Org.OpenAPITools/Model/AbstractOpenAPISchema.cs" in files
        assert "README.md" in files
        assert ".gitignore" in files
        assert "git_push.sh" in files
        assert "src/Org.OpenAPITools/Client/FileParameter.cs" not in files
        assert "src/Org.OpenAPITools/Client/WebRequestPathBuilder.cs" not in files
        assert "src/Org.OpenAPITools/Client/HttpSigningConfiguration.cs" not in files

    def test_httpclient(self) -> None:
        files = destinations(GeneratorConfig(library="httpclient"), empty_spec())

        assert files[0] == "src/Org.OpenAPITools/Client/FileParameter.cs"
        assert "src/Org.OpenAPITools/Client/WebRequestPathBuilder.cs" in files
        assert "src/Org.OpenAPITools/Client/HttpMethod.cs" not in files

    def test_optional_files(self) -> None:
        config = GeneratorConfig(supports_retry=False, supports_async=False)
        files = destinations(config, empty_spec(http_signature=True))

        assert "src/Org.OpenAPITools/Client/HttpSigningConfiguration.cs" in files
        assert "src/Org.OpenAPITools/Client/RetryConfiguration.cs" not in files
        assert "src/Org.OpenAPITools/Client/IAsynchronousClient.cs" not in files

    def test_order_is_stable(self) -> None:
        config = GeneratorConfig()
        assert destinations(config, empty_spec()) == destinations(config, empty_spec())

    def test_relative_path_without_folder(self) -> None:
        files = collect_supporting_files(GeneratorConfig(), empty_spec())
        readme = next(f for f in files if f.template == "README.md.j2")
        assert readme.relative_path == PurePosixPath("README.md")


class TestPerItemTemplates:
    def test_tests_can_be_excluded(self) -> None:
        assert model_template_files(GeneratorConfig())["test"]
        assert api_template_files(GeneratorConfig())["test"]
        assert model_template_files(GeneratorConfig(exclude_tests=True))["test"] == []
        assert api_template_files(GeneratorConfig(exclude_tests=True))["test"] == []

    def test_folders(self) -> None:
        config = GeneratorConfig(package_name="My.Pets", source_folder="source")

        assert model_folders(config) == {
            "source": "source/My.Pets/Model",
            "doc": "docs",
            "test": "source/My.Pets.Test/Model",
        }
        assert api_folders(config)["test"] == "source/My.Pets.Test/Api"
