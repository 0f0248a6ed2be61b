# This is a simple server for the chat agent.
# uvicorn mockdb_agent.fast_api_server:app --reload --port 9000
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from starlette.concurrency import run_in_threadpool

from mockdb_agent.agent_handler import lambda_handler


def _process_response(lambda_resp: dict[str, Any]) -> Response | JSONResponse:
    """Convert an AWS Lambda-style proxy response into a FastAPI Response."""
    status_code = lambda_resp.get("statusCode", 200)
    content_type = lambda_resp.get("headers", {}).get("Content-Type", "text/plain")
    body = lambda_resp.get("body", "")

    # Handle dict content as JSON
    if isinstance(body, dict):
        return JSONResponse(content=body, status_code=status_code)

    return Response(content=body, status_code=status_code, media_type=content_type)


def _process_request(body: bytes, request: Request) -> Response | JSONResponse:
    """Convert a FastAPI request to a Lambda-style event."""
    query_params = dict(request.query_params)
    path = request.url.path
    method = request.method
    route_key = f"{method} {path}"

    event = {
        "routeKey": route_key,
        "body": body,
        "isBase64Encoded": False,
        "headers": dict(request.headers),
        "queryStringParameters": query_params,
        "requestContext": {"routeKey": route_key, "http": {"method": method, "path": path}},
    }
    # Called from the threadpool; lambda_handler blocks on the model and Redis
    lambda_response = lambda_handler(event, None)
    return _process_response(lambda_response)


app = FastAPI(title="Mock DB Chat Agent")


# --- chat turns ---
@app.post("/agents/chat")
async def chat(request: Request) -> Response:
    body = await request.body()
    return await run_in_threadpool(_process_request, body, request)


# --- transcript ---
@app.get("/agents/chat/transcript")
async def transcript(request: Request) -> Response:
    body = await request.body()
    return await run_in_threadpool(_process_request, body, request)


@app.delete("/agents/chat/transcript")
async def clear_transcript(request: Request) -> Response:
    body = await request.body()
    return await run_in_threadpool(_process_request, body, request)


# --- mock database ---
@app.get("/agents/chat/db")
async def db_snapshot(request: Request) -> Response:
    body = await request.body()
    return await run_in_threadpool(_process_request, body, request)


@app.get("/healthz")
def healthz() -> dict[str, bool]:
    return {"ok": True}
