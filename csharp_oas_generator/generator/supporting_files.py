"""
Template selection.

Decides which templates are rendered for a run and where their output goes.
Nothing here renders or writes; the result is a plan consumed by the
code generator.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Final

from csharp_oas_generator.config import GeneratorConfig, HttpLibrary
from csharp_oas_generator.parser.models import ParsedSpec

API_DOC_PATH: Final = "docs"
MODEL_DOC_PATH: Final = "docs"


@dataclass(frozen=True)
class SupportingFile:
    """A template rendered once per run."""

    template: str
    folder: str
    destination: str

    @property
    def relative_path(self) -> PurePosixPath:
        return PurePosixPath(self.folder, self.destination) if self.folder else PurePosixPath(self.destination)


@dataclass(frozen=True)
class TemplateFile:
    """A template rendered once per model or per API, with the output file suffix."""

    template: str
    suffix: str


def _client_file(config: GeneratorConfig, name: str) -> SupportingFile:
    return SupportingFile(f"client/{name}.cs.j2", config.client_package_dir, f"{name}.cs")


def collect_supporting_files(config: GeneratorConfig, spec: ParsedSpec) -> list[SupportingFile]:
    """Return the supporting files for a run, in a stable order."""
    capabilities = config.capabilities
    files: list[SupportingFile] = []

    if config.library is HttpLibrary.HTTPCLIENT:
        files.append(_client_file(config, "FileParameter"))

    for name in (
        "IApiAccessor",
        "Configuration",
        "ApiClient",
        "ApiException",
        "ApiResponse",
        "ExceptionFactory",
        "OpenAPIDateConverter",
        "ClientUtils",
    ):
        files.append(_client_file(config, name))

    if capabilities.needs_custom_http_method:
        files.append(_client_file(config, "HttpMethod"))
    if capabilities.needs_uri_builder:
        files.append(_client_file(config, "WebRequestPathBuilder"))
    if spec.has_http_signature_methods:
        files.append(_client_file(config, "HttpSigningConfiguration"))
    if config.use_async:
        files.append(_client_file(config, "IAsynchronousClient"))

    for name in ("ISynchronousClient", "RequestOptions", "Multimap"):
        files.append(_client_file(config, name))

    if config.supports_retry:
        files.append(_client_file(config, "RetryConfiguration"))

    files.append(_client_file(config, "IReadableConfiguration"))
    files.append(_client_file(config, "GlobalConfiguration"))

    files.append(SupportingFile("README.md.j2", "", "README.md"))
    files.append(SupportingFile("git_push.sh.j2", "", "git_push.sh"))
    files.append(SupportingFile("gitignore.j2", "", ".gitignore"))
    files.append(
        SupportingFile("model/AbstractOpenAPISchema.cs.j2", config.model_package_dir, "AbstractOpenAPISchema.cs")
    )
    return files


def model_template_files(config: GeneratorConfig) -> dict[str, list[TemplateFile]]:
    """Per-model templates keyed by the output folder kind (source, doc, test)."""
    templates = {
        "source": [TemplateFile("model/model.cs.j2", ".cs")],
        "doc": [TemplateFile("model/model_doc.md.j2", ".md")],
        "test": [],
    }
    if not config.exclude_tests:
        templates["test"].append(TemplateFile("model/model_test.cs.j2", ".cs"))
    return templates


def api_template_files(config: GeneratorConfig) -> dict[str, list[TemplateFile]]:
    """Per-API templates keyed by the output folder kind (source, doc, test)."""
    templates = {
        "source": [TemplateFile("api/api.cs.j2", ".cs")],
        "doc": [TemplateFile("api/api_doc.md.j2", ".md")],
        "test": [],
    }
    if not config.exclude_tests:
        templates["test"].append(TemplateFile("api/api_test.cs.j2", ".cs"))
    return templates


def model_folders(config: GeneratorConfig) -> dict[str, str]:
    return {
        "source": config.model_package_dir,
        "doc": MODEL_DOC_PATH,
        "test": f"{config.test_package_folder}/{config.model_package}",
    }


def api_folders(config: GeneratorConfig) -> dict[str, str]:
    return {
        "source": config.api_package_dir,
        "doc": API_DOC_PATH,
        "test": f"{config.test_package_folder}/{config.api_package}",
    }
