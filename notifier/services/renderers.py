"""Notification bodies for YouTrack webhook payloads."""

from __future__ import annotations

from enum import Enum
from typing import Callable

from notifier.schemas import ASSIGNEE, COMMENT, PRIORITY, STATE, Change, WebhookPayload
from notifier.services.escape import (
    escape_link_text,
    escape_markdown,
    escape_url,
    field_icon,
)
from notifier.services.extract import (
    ChangeValueDecoder,
    field_display,
    translate_field_name,
    user_display,
)
from notifier.services.mentions import MentionStyle, format_mention

Renderer = Callable[[WebhookPayload], str]

ARROW = "→"

CHANGE_HEADERS = {
    STATE: "*📊 Изменен статус задачи*",
    PRIORITY: "*⚡️ Изменен приоритет задачи*",
    ASSIGNEE: "*👤 Изменен исполнитель задачи*",
    COMMENT: "*💬 Добавлен комментарий*",
}

_plain_decoder = ChangeValueDecoder(MentionStyle.PLAIN_NAME)


def _project_name(payload: WebhookPayload) -> str:
    if payload.project is None:
        return ""
    return payload.project.name or payload.project.presentation or ""


def _summarize_changes_plain(changes: list[Change]) -> str:
    parts = []
    for change in changes:
        label = translate_field_name(change.field)
        new = _plain_decoder(change.new_value, change.field)
        if change.field == COMMENT:
            parts.append(f"{label}: {new}")
        else:
            old = _plain_decoder(change.old_value, change.field)
            parts.append(f"{label}: {old} {ARROW} {new}")
    return "; ".join(parts)


def render_default(payload: WebhookPayload) -> str:
    """Plain text body used for channels without dedicated markup."""
    issue = payload.issue
    lines = [
        "",
        f"Проект: {field_display(payload.project)}",
        f"Задача: {issue.summary}",
        f"Ссылка: {issue.url}",
        f"Статус: {field_display(issue.state)}",
        f"Приоритет: {field_display(issue.priority)}",
        f"Исполнитель: {user_display(issue.assignee)}",
        f"Автор изменения: {user_display(payload.updater)}",
        f"Изменения: {_summarize_changes_plain(payload.changes)}",
    ]
    return "\n".join(lines)


class Layout(str, Enum):
    """Markdown message layouts.

    ``FULL_ECHO`` lists a header per change, the current issue fields and,
    for comments, a trailing change log. ``INLINE`` keeps only the latest
    header and shows ``old → new`` directly on the changed field's line.
    """

    FULL_ECHO = "full"
    INLINE = "inline"


class MarkdownRenderer:
    """MarkdownV2 renderer parameterized by mention style and layout."""

    def __init__(self, mention_style: MentionStyle, layout: Layout = Layout.INLINE) -> None:
        self.mention_style = mention_style
        self.layout = Layout(layout)
        self.decoder = ChangeValueDecoder(mention_style)

    def __call__(self, payload: WebhookPayload) -> str:
        return self.render(payload)

    def render(self, payload: WebhookPayload) -> str:
        if self.layout is Layout.FULL_ECHO:
            return self._render_full_echo(payload)
        return self._render_inline(payload)

    def _transition(self, change: Change) -> str:
        old = self.decoder(change.old_value, change.field)
        new = self.decoder(change.new_value, change.field)
        return f"{escape_markdown(old)} {ARROW} {escape_markdown(new)}"

    def _block(
        self,
        payload: WebhookPayload,
        *,
        state: str,
        priority: str,
        assignee: str,
    ) -> list[str]:
        issue = payload.issue
        return [
            f"*📁 Проект:* {escape_markdown(_project_name(payload))}",
            f"*📋 Задача:* {escape_markdown(issue.summary)}",
            f"*🔗 Ссылка:* [{escape_link_text(issue.url)}]({escape_url(issue.url)})",
            f"*📊 Состояние:* {state}",
            f"*⚡️ Приоритет:* {priority}",
            f"*👤 Назначена:* {assignee}",
            f"*✏️ Автор изменения:* {escape_markdown(user_display(payload.updater))}",
        ]

    def _render_full_echo(self, payload: WebhookPayload) -> str:
        issue = payload.issue
        lines = [CHANGE_HEADERS[c.field] for c in payload.changes if c.field in CHANGE_HEADERS]
        lines.append("")
        lines.extend(
            self._block(
                payload,
                state=escape_markdown(field_display(issue.state)),
                priority=escape_markdown(field_display(issue.priority)),
                assignee=escape_markdown(user_display(issue.assignee)),
            )
        )

        if any(c.field == COMMENT for c in payload.changes):
            log = []
            for change in payload.changes:
                prefix = f"{field_icon(change.field)} *{translate_field_name(change.field)}:*"
                if change.field == COMMENT:
                    new = self.decoder(change.new_value, change.field)
                    log.append(f"{prefix} {escape_markdown(new)}")
                else:
                    log.append(f"{prefix} {self._transition(change)}")
            lines.append("")
            lines.append("🔄 *Изменения:*")
            lines.extend(log)
        return "\n".join(lines)

    def _render_inline(self, payload: WebhookPayload) -> str:
        issue = payload.issue
        mention = format_mention(self.mention_style, issue.assignee)

        changed: Change | None = None
        for change in payload.changes:
            if change.field in CHANGE_HEADERS:
                changed = change
        field = changed.field if changed else None

        lines = []
        if changed is not None:
            lines.append(CHANGE_HEADERS[changed.field])
        lines.append("")

        state = escape_markdown(field_display(issue.state))
        priority = escape_markdown(field_display(issue.priority))
        assignee = escape_markdown(mention)
        if field == STATE:
            state = self._transition(changed)
        elif field == PRIORITY:
            priority = self._transition(changed)
        elif field == ASSIGNEE:
            # The new side is the current assignee's mention so it notifies them.
            old = self.decoder(changed.old_value, changed.field)
            assignee = f"{escape_markdown(old)} {ARROW} {escape_markdown(mention)}"
        lines.extend(self._block(payload, state=state, priority=priority, assignee=assignee))

        if field == COMMENT:
            comment = self.decoder(changed.new_value, changed.field)
            lines.append("")
            lines.append(f"*{field_icon(COMMENT)} {translate_field_name(COMMENT)}*: {escape_markdown(comment)}")
        return "\n".join(lines)


def telegram_renderer(layout: Layout = Layout.INLINE) -> MarkdownRenderer:
    return MarkdownRenderer(MentionStyle.LOGIN_TAG, layout)


def vkteams_renderer(layout: Layout = Layout.INLINE) -> MarkdownRenderer:
    return MarkdownRenderer(MentionStyle.EMAIL_BRACKET, layout)
