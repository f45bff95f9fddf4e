"""Render artifact tasks with jinja2 and write them, honoring each task's write policy."""

from __future__ import annotations

import logging
from pathlib import Path

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError,
    TemplateNotFound,
)

from cqrsgen.config import GeneratorOptions
from cqrsgen.errors import MissingTemplateError
from cqrsgen.model.ir import ArtifactTask, EmissionReport, TemplateKind, WritePolicy

logger = logging.getLogger(__name__)

TEMPLATE_NAMES = {
    TemplateKind.DTO: "dto.cs.j2",
    TemplateKind.COMMAND: "command.cs.j2",
    TemplateKind.QUERY: "query.cs.j2",
    TemplateKind.HANDLER: "handler.cs.j2",
    TemplateKind.VALIDATOR: "validator.cs.j2",
}


class Renderer:
    """Renders one artifact kind's context into text."""

    def __init__(self, templates_dir: str | Path, template_names: dict[TemplateKind, str] | None = None) -> None:
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        self.template_names = template_names or TEMPLATE_NAMES

    def check(self, kinds: set[TemplateKind]) -> None:
        """Raise MissingTemplateError if any of kinds has no loadable template."""
        for kind in sorted(kinds, key=lambda k: k.value):
            name = self.template_names.get(kind, "")
            try:
                if not name:
                    raise TemplateNotFound(kind.value)
                self.env.get_template(name)
            except TemplateNotFound as e:
                raise MissingTemplateError(kind.value, name) from e

    def render(self, kind: TemplateKind, context: dict) -> str:
        return self.env.get_template(self.template_names[kind]).render(**context)


def write_plan(
    tasks: list[ArtifactTask],
    output_dir: str | Path,
    renderer: Renderer,
) -> EmissionReport:
    """Render and write every task under output_dir.

    A missing template is fatal and detected before anything is written. A
    render or I/O failure on one artifact is logged and recorded, and the
    remaining artifacts are still written.
    """
    renderer.check({t.template_kind for t in tasks})

    out = Path(output_dir)
    report = EmissionReport()
    for task in tasks:
        target = out / task.output_path
        try:
            content = renderer.render(task.template_kind, task.context)
            target.parent.mkdir(parents=True, exist_ok=True)
            created = _write(target, content, task.write_policy)
        except (TemplateError, OSError) as e:
            logger.error("Failed to generate %s '%s': %s", task.template_kind.value, task.output_path, e)
            report.failed.append((task.output_path, str(e)))
            continue
        if not created:
            logger.info("Skipping %s '%s' - already exists", task.template_kind.value, task.output_path)
            report.skipped.append(task.output_path)
            continue
        logger.info("Generated %s file: %s", task.template_kind.value, task.output_path)
        report.written.append(task.output_path)

    return report


def _write(target: Path, content: str, policy: WritePolicy) -> bool:
    """Write content to target; return False if a write-once target already exists."""
    if policy is WritePolicy.WRITE_ONCE:
        # Exclusive create: the existence check and the write are one operation
        try:
            f = open(target, "x", encoding="utf-8")
        except FileExistsError:
            return False
        try:
            with f:
                f.write(content)
        except BaseException:
            # Never leave a partial write-once file behind
            target.unlink(missing_ok=True)
            raise
        return True
    target.write_text(content, encoding="utf-8")
    return True


def emit(tasks: list[ArtifactTask], options: GeneratorOptions | None = None) -> EmissionReport:
    """Write tasks using the templates and output directory from options."""
    options = options or GeneratorOptions()
    return write_plan(tasks, options.output_dir, Renderer(options.templates_dir))
