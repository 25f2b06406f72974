"""Workflow codec — TenderRecord <-> GitHub Actions workflow text.

Rendering writes the document line by line. Parsing does not load the YAML
structure: it scans for marker lines, so hand-edited workflows still parse
and unrelated workflows in the same directory are simply not recognized.
"""

from __future__ import annotations

import json

import yaml

from tender.core.tenders.types import TenderRecord, normalize_timeout_minutes

NAME_PREFIX = "tender/"
RUNNER_MARKER = "opencode run"

_NAME_KEY = "name:"
_STEP_NAME_KEY = "- name:"
_AGENT_KEY = "TENDER_AGENT:"
_PROMPT_KEY = "TENDER_PROMPT:"
_CRON_KEY = "- cron:"
_TIMEOUT_KEY = "timeout-minutes:"
_DISPATCH_LINE = "workflow_dispatch:"
_PUSH_LINE = "push:"

_INSTALL_STEP = """\
      - name: Install OpenCode
        shell: bash
        run: |
          set -euo pipefail
          curl -fsSL https://opencode.ai/install | bash
          echo "$HOME/bin" >> "$GITHUB_PATH"
          echo "$HOME/.local/bin" >> "$GITHUB_PATH"
          echo "$HOME/.opencode/bin" >> "$GITHUB_PATH"
"""

_PREPARE_STEP = """\
      - name: Prepare main
        shell: bash
        run: |
          set -euo pipefail
          git config user.name "tender[bot]"
          git config user.email "tender[bot]@users.noreply.github.com"
          git fetch origin main
          git checkout -B main origin/main
"""

# Prompt precedence: dispatch input > TENDER_PROMPT > the agent's own default.
_RUN_STEP = """\
      - name: Run OpenCode
        shell: bash
        env:
          OPENAI_API_KEY: ${{ secrets.OPENAI_API_KEY }}
          ANTHROPIC_API_KEY: ${{ secrets.ANTHROPIC_API_KEY }}
        run: |
          set -euo pipefail
          DISPATCH_PROMPT="${{ github.event_name == 'workflow_dispatch' && inputs.prompt || '' }}"
          if [ -n "${DISPATCH_PROMPT:-}" ]; then
            opencode run --agent "$TENDER_AGENT" "$DISPATCH_PROMPT"
          elif [ -n "${TENDER_PROMPT:-}" ]; then
            opencode run --agent "$TENDER_AGENT" "$TENDER_PROMPT"
          else
            opencode run --agent "$TENDER_AGENT"
          fi
"""

_COMMIT_STEP = """\
      - name: Commit and push main
        shell: bash
        run: |
          set -euo pipefail
          CURRENT_BRANCH="$(git rev-parse --abbrev-ref HEAD || echo detached)"
          AHEAD_COUNT="$(git rev-list --count origin/main..HEAD || echo 0)"
          if git diff --quiet --ignore-submodules -- && git diff --cached --quiet --ignore-submodules --; then
            if [ "$CURRENT_BRANCH" != "main" ] || [ "$AHEAD_COUNT" -gt 0 ]; then
              echo "No working tree changes; pushing existing commits from $CURRENT_BRANCH to main"
              git pull --rebase origin main
              git push origin HEAD:main
              exit 0
            fi
            echo "No changes to commit"
            exit 0
          fi
          git add -A
          git commit -m "tender($TENDER_NAME): autonomous update"
          git pull --rebase origin main
          git push origin HEAD:main
"""


# ════════════════════════════════════════════════════════════
# RENDER
# ════════════════════════════════════════════════════════════


def quote_value(value: str) -> str:
    """Double-quote a value so it is valid YAML and stays on one line.

    JSON string escaping is a subset of YAML double-quoted escaping; any
    remaining non-printable character is written as ``\\uXXXX``.
    """
    quoted = json.dumps(value, ensure_ascii=False)
    return "".join(
        ch if ch.isprintable() or ord(ch) > 0xFFFF else f"\\u{ord(ch):04x}"
        for ch in quoted
    )


def render_workflow(tender: TenderRecord) -> str:
    """Render a tender as a self-contained workflow document."""
    name = tender.name.strip()
    cron = tender.cron.strip()

    lines = [f"name: {quote_value(NAME_PREFIX + name)}", "", "on:"]
    if tender.manual:
        lines += [
            "  workflow_dispatch:",
            "    inputs:",
            "      prompt:",
            '        description: "Optional prompt override"',
            "        required: false",
            '        default: ""',
            "        type: string",
        ]
    if tender.push:
        lines += [
            "  push:",
            "    branches:",
            "      - main",
        ]
    if cron:
        lines += [
            "  schedule:",
            f"    - cron: {quote_value(cron)}",
        ]
    if not tender.has_trigger:
        # Keep the document runnable on its own.
        lines.append("  workflow_dispatch:")

    lines += [
        "",
        "permissions:",
        "  contents: write",
        "",
        "concurrency:",
        "  group: tender-main",
        "  cancel-in-progress: false",
        "",
        "jobs:",
        "  tender:",
        "    runs-on: ubuntu-latest",
        f"    timeout-minutes: {normalize_timeout_minutes(tender.timeout_minutes)}",
        "    env:",
        f"      TENDER_NAME: {quote_value(name)}",
        f"      TENDER_AGENT: {quote_value(tender.agent.strip())}",
        f"      TENDER_PROMPT: {quote_value(tender.prompt.strip())}",
        "    steps:",
        "      - uses: actions/checkout@v4",
        "        with:",
        "          fetch-depth: 0",
        "",
    ]
    head = "\n".join(lines) + "\n"
    return "\n".join([head + _INSTALL_STEP, _PREPARE_STEP, _RUN_STEP, _COMMIT_STEP])


# ════════════════════════════════════════════════════════════
# PARSE
# ════════════════════════════════════════════════════════════


def parse_scalar(raw: str) -> str:
    """Decode a single YAML scalar as text, tolerating hand-edited quoting."""
    raw = raw.strip()
    if not raw:
        return ""
    try:
        value = yaml.safe_load(raw)
    except yaml.YAMLError:
        return raw.strip("\"'")
    if isinstance(value, str):
        return value
    return raw.strip("\"'")


def parse_workflow(content: str) -> TenderRecord | None:
    """Recover a tender from workflow text; None if it is not a managed tender.

    A document is managed only if it has the ``tender/`` identity line, a
    non-empty ``TENDER_AGENT`` and a line invoking ``opencode run``.
    """
    fields: dict[str, object] = {}
    has_identity = has_agent = has_runner = False

    for line in content.split("\n"):
        trim = line.strip()
        if trim.startswith(_NAME_KEY) and not trim.startswith(_STEP_NAME_KEY):
            value = parse_scalar(trim[len(_NAME_KEY):])
            if value.startswith(NAME_PREFIX):
                fields["name"] = value[len(NAME_PREFIX):]
                has_identity = True
        elif trim == _DISPATCH_LINE:
            fields["manual"] = True
        elif trim == _PUSH_LINE:
            fields["push"] = True
        elif trim.startswith(_CRON_KEY):
            fields["cron"] = parse_scalar(trim[len(_CRON_KEY):])
        elif trim.startswith(_AGENT_KEY):
            agent = parse_scalar(trim[len(_AGENT_KEY):])
            fields["agent"] = agent
            has_agent = bool(agent.strip())
        elif trim.startswith(_PROMPT_KEY):
            fields["prompt"] = parse_scalar(trim[len(_PROMPT_KEY):])
        elif trim.startswith(_TIMEOUT_KEY):
            fields["timeout_minutes"] = _parse_timeout(trim[len(_TIMEOUT_KEY):])
        elif RUNNER_MARKER in trim:
            has_runner = True

    if not (has_identity and has_agent and has_runner):
        return None

    tender = TenderRecord(**fields)
    if not tender.name:
        tender = tender.model_copy(update={"name": tender.agent})
    return tender


def _parse_timeout(raw: str) -> int:
    value = parse_scalar(raw)
    try:
        return normalize_timeout_minutes(int(value))
    except ValueError:
        return normalize_timeout_minutes(None)
