import pytest

from tools import FunctionDefinition, ToolSpec, normalize_tool_schema


def _collect():
    failures = []
    return failures, lambda name, problem: failures.append((name, problem))


def test_valid_tools_are_normalized():
    failures, on_failure = _collect()
    tools = [
        ToolSpec(name="read_file", description="Read", input_schema={"properties": {"path": {"type": "string"}}, "required": ["path", "ghost"]}),
        ToolSpec(name="noop", description="Nothing"),
    ]

    normalized = normalize_tool_schema("claude", tools, on_failure)

    assert failures == []
    assert [tool.name for tool in normalized] == ["read_file", "noop"]
    assert normalized[0].parameters["type"] == "object"
    assert normalized[0].parameters["required"] == ["path"]
    assert normalized[1].parameters == {"type": "object", "properties": {}}


def test_invalid_tools_are_dropped_and_reported():
    failures, on_failure = _collect()
    tools = [
        ToolSpec(name="bad name", description=""),
        ToolSpec(name="arrayish", description="", input_schema={"type": "array"}),
        ToolSpec(name="fine", description=""),
    ]

    normalized = normalize_tool_schema("claude", tools, on_failure)

    assert [tool.name for tool in normalized] == ["fine"]
    assert [name for name, _ in failures] == ["bad name", "arrayish"]


def test_claude_family_rejects_top_level_composites():
    failures, on_failure = _collect()
    tools = [ToolSpec(name="either", description="", input_schema={"type": "object", "anyOf": [{}]})]

    assert normalize_tool_schema("claude-sonnet", tools, on_failure) == []
    assert "anyOf" in failures[0][1]
    # other families accept it
    assert len(normalize_tool_schema("other", tools, on_failure)) == 1


def test_gpt_family_rules():
    failures, on_failure = _collect()
    tools = [
        ToolSpec(name="verbose", description="x" * 1025),
        ToolSpec(
            name="listy",
            description="",
            input_schema={"type": "object", "properties": {"items": {"type": "array"}}},
        ),
        ToolSpec(name="ok", description="x" * 1024),
    ]

    normalized = normalize_tool_schema("gpt-4.1", tools, on_failure)

    assert [tool.name for tool in normalized] == ["ok"]
    assert "1024" in failures[0][1]
    assert "parameters.items" in failures[1][1]


@pytest.mark.parametrize("tools", [None, []])
def test_no_tools(tools):
    assert normalize_tool_schema("claude", tools, lambda *_: None) == []


def test_anthropic_definition():
    definition = FunctionDefinition(name="grep", description="Search", parameters={"properties": {}})

    assert definition.to_anthropic_definition() == {
        "name": "grep",
        "description": "Search",
        "input_schema": {"type": "object", "properties": {}},
    }
