"""
C# Template Engine for OpenAPI Client Generation

This module uses Jinja2 templates to generate C# API client code
from parsed OpenAPI specifications.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from jinja2 import ChoiceLoader, Environment, FileSystemLoader, select_autoescape

from csharp_oas_generator.config import GeneratorConfig, HttpLibrary
from csharp_oas_generator.generator.filters import FILTERS, argument_name
from csharp_oas_generator.generator.supporting_files import (
    TemplateFile,
    api_folders,
    api_template_files,
    collect_supporting_files,
    model_folders,
    model_template_files,
)
from csharp_oas_generator.naming import NameResolver
from csharp_oas_generator.parser.models import Model, Operation, Parameter, ParsedSpec, Property
from csharp_oas_generator.utils.string_case import lower_camelcase, pascalcase, snakecase

logger = logging.getLogger(__name__)

DEFAULT_TAG = "Default"
TEMPLATES_DIR = Path(__file__).parent.parent / "templates"


class OperationAnalyzer:
    """Analyzes operations for grouping and parameters."""

    @staticmethod
    def group_operations_by_tag(operations: list[Operation]) -> dict[str, list[Operation]]:
        """Group operations by their first tag, in first-seen order."""
        groups: dict[str, list[Operation]] = {}
        for operation in operations:
            tag = operation.tags[0] if operation.tags else DEFAULT_TAG
            groups.setdefault(tag, []).append(operation)
        return groups

    @staticmethod
    def get_unique_tags(operations: list[Operation]) -> list[str]:
        """Get unique tags from operations."""
        tags = {tag for op in operations for tag in op.tags}
        return sorted(tags)

    @staticmethod
    def method_arguments(operation: Operation, *, optional_method_argument: bool) -> list[str]:
        """Build the C# argument list of an operation method."""
        arguments: list[str] = []
        for param in operation.all_params:
            argument = f"{param.data_type} {param.param_name}"
            if not param.required and optional_method_argument:
                argument += " = default"
            arguments.append(argument)
        return arguments

    @staticmethod
    def example_value(param: Parameter) -> str:
        """A C# expression usable as a placeholder argument in docs and tests."""
        if param.data_type.rstrip("?") == "string":
            return f'"{param.param_name}_example"'
        return "default"


class ModelAnalyzer:
    """Analyzes models for inheritance and imports."""

    @staticmethod
    def parent_class_name(model: Model, models: dict[str, Model]) -> str | None:
        """Resolve the parent's class name, or None when the parent is unknown."""
        if not model.parent:
            return None
        parent = models.get(model.parent)
        return parent.class_name if parent else None

    @staticmethod
    def base_types(model: Model, models: dict[str, Model], *, validatable: bool) -> list[str]:
        """Base class and interfaces of a generated model class."""
        parent = ModelAnalyzer.parent_class_name(model, models)
        bases = [parent] if parent else []
        if model.is_composed:
            bases.append("AbstractOpenAPISchema")
        bases.extend(model.interfaces)
        bases.append(f"IEquatable<{model.class_name}>")
        if validatable:
            bases.append("IValidatableObject")
        return bases

    @staticmethod
    def constructor_vars(model: Model) -> list[Property]:
        """Read-write properties set through the constructor, required first."""
        return sorted(model.read_write_vars, key=lambda p: not p.required)

    @staticmethod
    def constructor_arguments(model: Model, models: dict[str, Model]) -> list[Property]:
        """All constructor parameters: own properties first, then the inherited ones."""
        inherited = model.parent_vars if ModelAnalyzer.parent_class_name(model, models) else []
        return ModelAnalyzer.constructor_vars(model) + [p for p in inherited if not p.is_read_only]

    @staticmethod
    def base_arguments(model: Model, models: dict[str, Model]) -> list[str]:
        """Named arguments passed from a child constructor to its parent constructor.

        Every parameter of the parent constructor is forwarded, including the
        ones the child redeclares. Reference-typed arguments with a default fall
        back to it.
        """
        parent = models.get(model.parent) if model.parent else None
        if parent is None:
            return []

        available = {p.name: p for p in ModelAnalyzer.constructor_arguments(model, models)}
        arguments = []
        for parent_var in ModelAnalyzer.constructor_arguments(parent, models):
            var = available.get(parent_var.name)
            if var is None:
                continue
            value = argument_name(var.var_name)
            if var.default_value and not var.is_value_type:
                value = f"{value} ?? {var.default_value}"
            arguments.append(f"{argument_name(parent_var.var_name)}: {value}")
        return arguments


class CSharpTemplateEngine:
    """Template engine for generating C# code."""

    def __init__(
        self,
        template_dir: Path | None = None,
        library: HttpLibrary | str = HttpLibrary.RESTSHARP,
    ) -> None:
        """Initialize the template engine.

        Templates are looked up in ``template_dir`` first (when given), then in
        the library-specific override directory, then in the built-in templates.
        """
        self.library = HttpLibrary.parse(library)
        search_path = [TEMPLATES_DIR / "libraries" / self.library.value, TEMPLATES_DIR]
        if template_dir is not None:
            search_path.insert(0, Path(template_dir))

        self.search_path = search_path
        self.env = Environment(
            loader=ChoiceLoader([FileSystemLoader(str(path)) for path in search_path]),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

        self._register_filters()
        self._register_globals()

    def _register_filters(self) -> None:
        """Register custom Jinja2 filters for C# code generation."""
        builtin_filters = {
            "snake_case": snakecase,
            "pascal_case": pascalcase,
            "camel_case": lower_camelcase,
        }

        self.env.filters.update(builtin_filters)
        self.env.filters.update(FILTERS)

    def _register_globals(self) -> None:
        """Register global functions available in templates."""
        op_analyzer = OperationAnalyzer()
        model_analyzer = ModelAnalyzer()

        globals_map: dict[str, Any] = {
            "group_operations_by_tag": op_analyzer.group_operations_by_tag,
            "get_unique_tags": op_analyzer.get_unique_tags,
            "method_arguments": op_analyzer.method_arguments,
            "example_value": op_analyzer.example_value,
            "parent_class_name": model_analyzer.parent_class_name,
            "base_types": model_analyzer.base_types,
            "constructor_vars": model_analyzer.constructor_vars,
            "base_arguments": model_analyzer.base_arguments,
        }

        self.env.globals.update(globals_map)

    def render_template(self, template_name: str, context: dict[str, Any]) -> str:
        """Render a template with the given context."""
        logger.debug("rendering %s", template_name)
        template = self.env.get_template(template_name)
        return template.render(**context)


class CSharpCodeGenerator:
    """Main code generator for C# clients."""

    def __init__(
        self,
        config: GeneratorConfig | None = None,
        template_engine: CSharpTemplateEngine | None = None,
    ) -> None:
        """Initialize the code generator."""
        self.config = config or GeneratorConfig()
        self.template_engine = template_engine or CSharpTemplateEngine(library=self.config.library)
        self.names = NameResolver(self.config)

    def generate_client(self, spec: ParsedSpec, output_dir: Path) -> dict[Path, str]:
        """Generate the complete C# client from a parsed spec.

        Rendering does not touch the filesystem; the returned mapping of
        output path to file content is handed to the writer.
        """
        output_dir = Path(output_dir)
        context = self._base_context(spec)

        files: dict[Path, str] = {}
        files.update(self._generate_supporting_files(spec, context, output_dir))
        files.update(self._generate_model_files(spec.models, context, output_dir))
        files.update(self._generate_api_files(context["apis"], context, output_dir))
        return files

    def _base_context(self, spec: ParsedSpec) -> dict[str, Any]:
        config = self.config
        groups = OperationAnalyzer.group_operations_by_tag(spec.operations)
        apis = [
            {"tag": tag, "class_name": self.names.to_api_name(tag), "operations": operations}
            for tag, operations in groups.items()
        ]
        generated_date = None
        if not config.hide_generation_timestamp:
            generated_date = datetime.now(tz=timezone.utc).isoformat()

        return {
            "config": config,
            "frameworks": config.frameworks,
            "capabilities": config.capabilities,
            "spec": spec,
            "models": spec.models,
            "operations": spec.operations,
            "apis": apis,
            "package_name": config.package_name,
            "client_namespace": f"{config.package_name}.{config.client_package}",
            "model_namespace": f"{config.package_name}.{config.model_package}",
            "api_namespace": f"{config.package_name}.{config.api_package}",
            "test_namespace": config.test_package_name,
            "visibility": config.visibility,
            "generated_date": generated_date,
        }

    def _generate_supporting_files(
        self,
        spec: ParsedSpec,
        context: dict[str, Any],
        output_dir: Path,
    ) -> dict[Path, str]:
        """Generate files rendered once per run."""
        files = {}
        for supporting_file in collect_supporting_files(self.config, spec):
            content = self.template_engine.render_template(supporting_file.template, context)
            files[output_dir / supporting_file.relative_path] = content
        return files

    def _render_per_item(
        self,
        templates: dict[str, list[TemplateFile]],
        folders: dict[str, str],
        base_name: str,
        context: dict[str, Any],
        output_dir: Path,
    ) -> dict[Path, str]:
        files = {}
        for kind, template_files in templates.items():
            file_stem = f"{base_name}Tests" if kind == "test" else base_name
            for template_file in template_files:
                content = self.template_engine.render_template(template_file.template, context)
                files[output_dir / folders[kind] / f"{file_stem}{template_file.suffix}"] = content
        return files

    def _generate_model_files(
        self,
        models: dict[str, Model],
        context: dict[str, Any],
        output_dir: Path,
    ) -> dict[Path, str]:
        """Generate source, doc and test files for every model."""
        files = {}
        templates = model_template_files(self.config)
        folders = model_folders(self.config)

        for model in models.values():
            model_context = {
                **context,
                "model": model,
                "parent_model": models.get(model.parent) if model.parent else None,
            }
            files.update(self._render_per_item(templates, folders, model.class_name, model_context, output_dir))
        return files

    def _generate_api_files(
        self,
        apis: list[dict[str, Any]],
        context: dict[str, Any],
        output_dir: Path,
    ) -> dict[Path, str]:
        """Generate source, doc and test files for every API group."""
        files = {}
        templates = api_template_files(self.config)
        folders = api_folders(self.config)

        for api in apis:
            api_context = {**context, "api": api, "operations": api["operations"]}
            files.update(self._render_per_item(templates, folders, api["class_name"], api_context, output_dir))
        return files
