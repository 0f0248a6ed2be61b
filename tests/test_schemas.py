from mockdb_mcp.mcp.prompts import render_prompt
from mockdb_mcp.mcp.schemas import LIST, list_tools, openai_tools, tool_names

EXPECTED_TOOLS = [
    "search_product",
    "search_user",
    "search_users_by_name",
    "update_user_record",
    "list_users",
    "list_products",
    "reset_db",
]


def test_catalog_order_and_names():
    assert [t["name"] for t in list_tools()] == EXPECTED_TOOLS
    assert tool_names() == frozenset(EXPECTED_TOOLS)


def test_required_parameters():
    required = {name: spec["input_schema"].get("required", []) for name, spec in LIST.items()}
    assert required["search_product"] == []
    assert required["search_user"] == ["user_id"]
    assert required["search_users_by_name"] == ["name"]
    assert required["update_user_record"] == ["user_id", "field", "value"]
    assert required["list_users"] == []


def test_openai_tools_shape():
    tools = openai_tools()
    assert len(tools) == len(EXPECTED_TOOLS)
    for tool in tools:
        assert tool["type"] == "function"
        fn = tool["function"]
        assert set(fn) == {"name", "description", "parameters"}
        assert fn["parameters"]["type"] == "object"
        assert fn["description"]


def test_prompt_forces_tool_use():
    prompt = render_prompt()
    assert "MUST always use exactly one of the available tools" in prompt
    for name in EXPECTED_TOOLS:
        assert name in prompt
