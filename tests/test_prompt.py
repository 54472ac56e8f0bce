"""Tests for prompt templates."""

import pytest

from llmchain import BasePrompt, ChatPromptTemplate, PromptError, PromptTemplate


class TestPromptTemplate:
    """Tests for single-message templates."""

    def test_named_values(self):
        prompt = PromptTemplate("My name is {{name}}.")
        prompt.add_values({"name": "Luis"})

        assert prompt.to_chat_messages() == [{"role": "user", "content": "My name is Luis."}]

    def test_positional_value(self):
        prompt = PromptTemplate("My name is {{ name }}.")
        prompt.add_values(["Luis"])

        assert prompt.to_chat_messages()[0]["content"] == "My name is Luis."

    def test_latest_positional_value_wins(self):
        prompt = PromptTemplate("{{input}}")
        prompt.add_values(["first"])
        prompt.add_values(["second"])

        assert prompt.to_chat_messages()[0]["content"] == "second"
        assert prompt.positional_values == ["first", "second"]

    def test_positional_fills_remaining_in_order(self):
        prompt = PromptTemplate("{{a}}-{{b}}-{{c}}")
        prompt.add_values({"b": "B"})
        prompt.add_values(["x", "A", "C"])

        assert prompt.to_chat_messages()[0]["content"] == "A-B-C"

    def test_repeated_placeholder(self):
        prompt = PromptTemplate("{{x}} and {{x}}")
        prompt.add_values({"x": "1"})

        assert prompt.to_chat_messages()[0]["content"] == "1 and 1"

    def test_no_placeholders(self):
        prompt = PromptTemplate("Static text", role="system")
        prompt.add_values(["ignored"])

        assert prompt.to_chat_messages() == [{"role": "system", "content": "Static text"}]

    def test_missing_value_raises(self):
        prompt = PromptTemplate("{{greeting}}, {{name}}")
        prompt.add_values({"greeting": "Hello"})

        with pytest.raises(PromptError) as excinfo:
            prompt.to_chat_messages()

        assert excinfo.value.missing == ["name"]

    def test_nothing_added_raises(self):
        with pytest.raises(PromptError):
            PromptTemplate("{{name}}").to_chat_messages()

    def test_values_are_stringified(self):
        prompt = PromptTemplate("{{n}}")
        prompt.add_values({"n": 3})  # type: ignore[dict-item]

        assert prompt.to_chat_messages()[0]["content"] == "3"

    def test_invalid_values_type(self):
        with pytest.raises(TypeError):
            PromptTemplate("{{n}}").add_values("not a list")  # type: ignore[arg-type]

    def test_clear_values(self):
        prompt = PromptTemplate("{{n}}")
        prompt.add_values({"n": "1"})
        prompt.clear_values()

        with pytest.raises(PromptError):
            prompt.to_chat_messages()

    def test_implements_protocol(self):
        assert isinstance(PromptTemplate("x"), BasePrompt)


class TestChatPromptTemplate:
    """Tests for multi-message templates."""

    def test_input_variables_in_order(self):
        prompt = ChatPromptTemplate.from_messages([
            ("system", "Speak {{language}} as {{persona}}."),
            ("user", "{{question}} ({{language}})"),
        ])

        assert prompt.input_variables == ["language", "persona", "question"]

    def test_renders_all_messages(self):
        prompt = ChatPromptTemplate.from_messages([
            ("system", "Speak {{language}}."),
            ("assistant", "Ready."),
            ("user", "{{question}}"),
        ])
        prompt.add_values({"language": "French", "question": "Bonjour?"})

        assert prompt.to_chat_messages() == [
            {"role": "system", "content": "Speak French."},
            {"role": "assistant", "content": "Ready."},
            {"role": "user", "content": "Bonjour?"},
        ]

    def test_empty_template_list(self):
        with pytest.raises(ValueError):
            ChatPromptTemplate([])

    def test_unknown_role(self):
        with pytest.raises(ValueError):
            ChatPromptTemplate([("tool", "x")])  # type: ignore[list-item]
