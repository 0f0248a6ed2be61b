from typing import Any

LIST: dict[str, dict[str, Any]] = {
    "search_product": {
        "name": "search_product",
        "description": "Search for a product by name in the product database",
        "input_schema": {
            "type": "object",
            "required": [],
            "properties": {
                "product_name": {
                    "type": "string",
                    "description": "The name of the product to search for",
                },
                "product_price": {
                    "type": "number",
                    "description": "The price of the product to search for",
                },
            },
        },
    },
    "search_user": {
        "name": "search_user",
        "description": "Search for a user by their user ID",
        "input_schema": {
            "type": "object",
            "required": ["user_id"],
            "properties": {
                "user_id": {
                    "type": "string",
                    "description": "The unique identifier of the user to search for",
                },
            },
        },
    },
    "search_users_by_name": {
        "name": "search_users_by_name",
        "description": "Search for users whose name contains the given substring",
        "input_schema": {
            "type": "object",
            "required": ["name"],
            "properties": {
                "name": {"type": "string", "description": "Name or partial name to search for"},
            },
        },
    },
    "update_user_record": {
        "name": "update_user_record",
        "description": "Update a specific field in a user record",
        "input_schema": {
            "type": "object",
            "required": ["user_id", "field", "value"],
            "properties": {
                "user_id": {
                    "type": "string",
                    "description": "The unique identifier of the user to update",
                },
                "field": {
                    "type": "string",
                    "enum": ["name", "email", "status"],
                    "description": "The field name to update (e.g., email, name, status)",
                },
                "value": {
                    "type": "string",
                    "description": "The new value to set for the specified field",
                },
            },
        },
    },
    "list_users": {
        "name": "list_users",
        "description": "List all users in the database",
        "input_schema": {"type": "object", "properties": {}},
    },
    "list_products": {
        "name": "list_products",
        "description": "List all products in the database",
        "input_schema": {"type": "object", "properties": {}},
    },
    "reset_db": {
        "name": "reset_db",
        "description": "Reset the mock database to its initial state",
        "input_schema": {"type": "object", "properties": {}},
    },
}


def list_tools() -> list[dict[str, Any]]:
    return [
        {"name": v["name"], "description": v["description"], "input_schema": v["input_schema"]}
        for v in LIST.values()
    ]


def tool_names() -> frozenset[str]:
    return frozenset(LIST)


def openai_tools() -> list[dict[str, Any]]:
    """
    Build Chat Completions tool specs from the catalog.

    Example tool item:
      {
        "type": "function",
        "function": {
          "name": "search_user",
          "description": "...",
          "parameters": { ... JSON Schema ... }
        }
      }
    """
    return [
        {
            "type": "function",
            "function": {
                "name": t["name"],
                "description": t["description"],
                "parameters": t["input_schema"],
            },
        }
        for t in list_tools()
    ]
