"""
Report renderer: turn an AggregateReport into the raw JSON document and the Markdown digest.
Markdown sections are rendered with the Jinja2 templates in report/templates.
"""

import json
import os
from typing import List, Tuple
from jinja2 import Environment, FileSystemLoader, StrictUndefined
from normalize.models import AggregateReport, report_to_dict

CONTRIBUTORS_HEADING = "### Repository Activity"
OTHERS_LABEL = "All other contributors"
DEFAULT_WEB_BASE = "https://github.com"

_TEMPLATE_DIR = os.path.join(os.path.dirname(__file__), 'templates')


def _environment() -> Environment:
    # Markdown output: no HTML autoescaping
    return Environment(
        loader=FileSystemLoader(_TEMPLATE_DIR),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )


def render_json(report: AggregateReport) -> str:
    """Serialize the aggregate with repositories in configuration order, pretty-printed."""
    return json.dumps(report_to_dict(report), indent=2, ensure_ascii=False)


def render_activity_sections(report: AggregateReport, env: Environment = None, web_base: str = DEFAULT_WEB_BASE) -> List[str]:
    """One Markdown section per repository that has at least one fixed issue or merged pull."""
    env = env or _environment()
    tmpl = env.get_template('section_activity.md.j2')
    return [
        tmpl.render(path=path, repo_url=f"{web_base}/{path}", activity=activity)
        for path, activity in report.items()
        if activity.has_activity
    ]


def render_contributor_sections(report: AggregateReport, env: Environment = None) -> List[str]:
    """One Markdown section per repository with at least one counted commit."""
    env = env or _environment()
    tmpl = env.get_template('section_contributors.md.j2')
    return [
        tmpl.render(path=path, commit_counts=activity.commit_counts, others_label=OTHERS_LABEL)
        for path, activity in report.items()
        if activity.commit_counts
    ]


def render_markdown(report: AggregateReport, template: str = "", web_base: str = DEFAULT_WEB_BASE) -> str:
    """Template text, then the activity stream, then the contributors heading and stream."""
    env = _environment()
    parts: List[str] = []
    parts.extend(render_activity_sections(report, env, web_base))
    parts.append(CONTRIBUTORS_HEADING + "\n")
    parts.extend(render_contributor_sections(report, env))
    body = "\n".join(parts)
    if not template:
        return body
    # template text is kept verbatim; a blank line separates it from the streams
    separator = "\n" if template.endswith("\n") else "\n\n"
    return template + separator + body


def render(report: AggregateReport, template: str = "", web_base: str = DEFAULT_WEB_BASE) -> Tuple[str, str]:
    """Main render function. Returns (raw_json, markdown)."""
    return render_json(report), render_markdown(report, template, web_base)


def read_template(path: str) -> str:
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def _write_file(path: str, content: str):
    out_dir = os.path.dirname(path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as fh:
        fh.write(content)


def write_outputs(raw_json: str, markdown: str, json_path: str = "", markdown_path: str = "") -> List[str]:
    """Persist the optional artifacts; returns the paths that were written."""
    written = []
    if json_path:
        _write_file(json_path, raw_json + "\n")
        written.append(json_path)
    if markdown_path:
        _write_file(markdown_path, markdown)
        written.append(markdown_path)
    return written
