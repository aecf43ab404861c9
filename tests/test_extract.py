"""Tests for field/user display values and change value decoding."""

import pytest

from notifier.schemas import CommentValue, FieldValue, UserRef
from notifier.services.extract import (
    UNSET_MARKER,
    ChangeValueDecoder,
    field_display,
    render_comment,
    translate_field_name,
    user_display,
)
from notifier.services.mentions import MentionStyle


class TestFieldDisplay:
    def test_none(self):
        assert field_display(None) == ""

    def test_presentation_wins(self):
        assert field_display(FieldValue(name="In Progress", presentation="В работе")) == "В работе"

    @pytest.mark.parametrize("presentation", [None, ""])
    def test_falls_back_to_name(self, presentation):
        assert field_display(FieldValue(name="High", presentation=presentation)) == "High"

    def test_all_empty(self):
        assert field_display(FieldValue(name="", presentation="")) == ""
        assert field_display(FieldValue()) == ""


class TestUserDisplay:
    def test_none(self):
        assert user_display(None) == ""

    def test_full_name_wins(self):
        assert user_display(UserRef(full_name="John Doe", login="john")) == "John Doe"

    @pytest.mark.parametrize("full_name", [None, ""])
    def test_falls_back_to_login(self, full_name):
        assert user_display(UserRef(full_name=full_name, login="john", email="j@x.io")) == "john"

    def test_email_is_never_a_display_name(self):
        assert user_display(UserRef(email="j@x.io")) == ""


def test_translate_field_name():
    assert translate_field_name("State") == "Состояние"
    assert translate_field_name("Assignee") == "Назначена"
    assert translate_field_name("Estimation") == "Estimation"


class TestChangeValueDecoder:
    @pytest.fixture
    def decode(self):
        return ChangeValueDecoder(MentionStyle.LOGIN_TAG)

    @pytest.mark.parametrize("raw", [b"", b"   ", b"null", b" null ", None])
    def test_absent_or_null(self, decode, raw):
        assert decode(raw, "AnyField") == UNSET_MARKER

    def test_raw_string_for_unknown_field(self, decode):
        assert decode(b'"Simple string"', "UnknownField") == "Simple string"

    def test_empty_string_is_kept(self, decode):
        assert decode(b'""', "UnknownField") == ""
        assert decode("", "UnknownField") == ""

    def test_state_and_priority(self, decode):
        assert decode({"name": "In Progress", "presentation": "В работе"}, "State") == "В работе"
        assert decode(b'{"name": "High"}', "Priority") == "High"

    def test_assignee(self, decode):
        assert decode({"fullName": "John Doe", "login": "john"}, "Assignee") == "John Doe"

    def test_comment_uses_mention_style(self, decode):
        value = {"text": "Hi", "mentionedUsers": [{"login": "bob"}]}
        assert decode(value, "Comment") == "Hi\n[Упомянуты: @bob]"

    def test_object_name_then_value(self, decode):
        assert decode({"name": "TestName", "value": "TestValue"}, "Unknown") == "TestName"
        assert decode({"value": "TestValue", "other": "field"}, "Unknown") == "TestValue"
        assert decode({"other": "field"}, "Unknown") == UNSET_MARKER

    @pytest.mark.parametrize("field", ["State", "Priority", "Assignee", "Comment", "Unknown"])
    def test_invalid_json(self, decode, field):
        assert decode(b"{invalid}", field) == UNSET_MARKER

    @pytest.mark.parametrize("field", ["State", "Assignee", "Comment"])
    def test_wrong_shape_for_structured_fields(self, decode, field):
        assert decode("just text", field) == UNSET_MARKER
        assert decode([1, 2], field) == UNSET_MARKER

    def test_comment_with_null_mentions(self, decode):
        assert decode(b'{"text": "Hello", "mentionedUsers": null}', "Comment") == "Hello"

    def test_comment_with_null_text(self, decode):
        value = {"text": None, "mentionedUsers": [{"login": "bob"}, None]}
        assert decode(value, "Comment") == "\n[Упомянуты: @bob]"

    def test_wrong_member_types(self, decode):
        assert decode({"name": 5}, "State") == UNSET_MARKER
        assert decode({"text": ["a"]}, "Comment") == UNSET_MARKER

    def test_custom_unset_marker(self):
        decode = ChangeValueDecoder(unset_marker="-")
        assert decode(None, "State") == "-"


class TestRenderComment:
    def test_no_mentions(self):
        comment = CommentValue(text="Plain text")
        assert render_comment(comment, MentionStyle.LOGIN_TAG) == "Plain text"

    def test_unescapes_known_sequences(self):
        comment = CommentValue(text=r"\*bold\* \~x\~ \`c\` \> q \| p \_keep")
        assert render_comment(comment, MentionStyle.PLAIN_NAME) == r"*bold* ~x~ `c` > q | p \_keep"

    def test_login_only_user(self):
        comment = CommentValue.model_validate({"text": "Hi", "mentionedUsers": [{"login": "bob"}]})
        assert render_comment(comment, MentionStyle.LOGIN_TAG).endswith("\n[Упомянуты: @bob]")

    def test_mentions_keep_order_and_drop_empty(self):
        comment = CommentValue.model_validate(
            {
                "text": "See",
                "mentionedUsers": [
                    {"login": "zed"},
                    {},
                    {"email": "amy@example.com", "login": "amy"},
                ],
            }
        )
        result = render_comment(comment, MentionStyle.EMAIL_BRACKET)
        assert result == "See\n[Упомянуты: @zed, @[amy@example.com]]"

    def test_only_empty_mentions_add_nothing(self):
        comment = CommentValue.model_validate({"text": "x", "mentionedUsers": [{}, {"fullName": ""}]})
        assert render_comment(comment, MentionStyle.LOGIN_TAG) == "x"
