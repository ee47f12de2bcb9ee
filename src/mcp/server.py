"""Budget coach MCP server.

Exposes financial snapshots, transaction listings, budget plans and the
AI coach as MCP tools. Bank data comes from Plaid; narration comes from
an OpenAI-compatible chat API when configured.
"""

import logging
import os
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from mcp.server.fastmcp import Context, FastMCP

# Ensure project root is on sys.path so `src` is importable when loaded
# directly by tools like `mcp dev` (which use importlib, not `python -m`).
_project_root = str(Path(__file__).resolve().parent.parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

load_dotenv()

from src.core.analyzers import build_snapshot, list_transactions
from src.core.coach_client import DEFAULT_MODEL, CoachClient, CoachError
from src.core.plaid_client import PlaidClient, PlaidError
from src.core.planner import compose_plan, parse_budget_state
from src.core.resolvers import resolve_date_window
from src.mcp.error_handling import handle_tool_errors
from src.mcp.formatters import (
    format_json_block,
    format_plan,
    format_snapshot,
    format_transaction_list,
)
from src.models.schemas import (
    AskCoachInput,
    ComposePlanInput,
    ListTransactionsInput,
    SnapshotInput,
)

logger = logging.getLogger("finance_mcp")

SERVICE_NAME = "budget-coach"


# --- Lifespan: initialize shared resources ---


@asynccontextmanager
async def app_lifespan(server: FastMCP):
    client_id = os.environ.get("PLAID_CLIENT_ID", "")
    secret = os.environ.get("PLAID_SECRET", "")
    plaid_env = os.environ.get("PLAID_ENV", "sandbox")
    openai_key = os.environ.get("OPENAI_API_KEY", "")

    plaid: Optional[PlaidClient] = None
    if client_id and secret:
        plaid = PlaidClient(client_id=client_id, secret=secret, environment=plaid_env)
        logger.info("Plaid client configured for %s", plaid.environment.value)
    else:
        logger.warning("PLAID_CLIENT_ID/PLAID_SECRET not set; bank data tools are disabled")

    coach: Optional[CoachClient] = None
    if openai_key:
        coach = CoachClient(
            api_key=openai_key,
            model=os.environ.get("COACH_MODEL", DEFAULT_MODEL),
        )
        logger.info("AI coach configured (key %s...)", openai_key[:8])
    else:
        logger.warning("OPENAI_API_KEY not set; plans use the rule-of-thumb fallback")

    yield {"plaid": plaid, "coach": coach}

    if plaid:
        await plaid.close()
    if coach:
        await coach.close()


mcp = FastMCP("finance_mcp", lifespan=app_lifespan)


# --- Helpers to get clients from context ---


def _get_deps(ctx) -> tuple[Optional[PlaidClient], Optional[CoachClient]]:
    state = ctx.request_context.lifespan_context
    return state["plaid"], state["coach"]


def _require_plaid(plaid: Optional[PlaidClient]) -> PlaidClient:
    if plaid is None:
        raise PlaidError(
            status_code=503,
            error_type="API_ERROR",
            error_code="NOT_CONFIGURED",
            error_message="Plaid is not configured. Set PLAID_CLIENT_ID and PLAID_SECRET.",
        )
    return plaid


# --- Read-Only Tools ---


@mcp.tool(
    name="finance_health",
    annotations={
        "title": "Health Check",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
@handle_tool_errors
async def finance_health(ctx: Context) -> str:
    """Report that the service is up and which collaborators are configured."""
    plaid, coach = _get_deps(ctx)
    return format_json_block({
        "status": "ok",
        "service": SERVICE_NAME,
        "plaid": plaid is not None,
        "coach": coach is not None,
    })


@mcp.tool(
    name="finance_get_snapshot",
    annotations={
        "title": "Financial Snapshot",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
@handle_tool_errors
async def finance_get_snapshot(params: SnapshotInput, ctx: Context) -> str:
    """Summarize income, spending and category totals over a date window (default: last month)."""
    plaid, _ = _get_deps(ctx)
    plaid = _require_plaid(plaid)

    start, end = resolve_date_window(params.start_date, params.end_date, params.days)
    transactions = await plaid.get_transactions(params.access_token, start, end)
    return format_snapshot(build_snapshot(transactions, start, end))


@mcp.tool(
    name="finance_list_transactions",
    annotations={
        "title": "List Transactions",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
@handle_tool_errors
async def finance_list_transactions(params: ListTransactionsInput, ctx: Context) -> str:
    """List transactions with signed amounts (spending negative) and an income/spending type."""
    plaid, _ = _get_deps(ctx)
    plaid = _require_plaid(plaid)

    start, end = resolve_date_window(params.start_date, params.end_date, params.days)
    transactions = await plaid.get_transactions(params.access_token, start, end)
    return format_transaction_list(list_transactions(transactions), params.limit)


@mcp.tool(
    name="finance_compose_plan",
    annotations={
        "title": "Compose Budget Plan",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": True,
    },
)
@handle_tool_errors
async def finance_compose_plan(params: ComposePlanInput, ctx: Context) -> str:
    """Build a budget plan with surplus, goal timelines and an optional recent-spending snapshot."""
    plaid, coach = _get_deps(ctx)
    state = parse_budget_state(params.budget_state)

    snapshot = None
    if params.access_token:
        plaid = _require_plaid(plaid)
        start, end = resolve_date_window(days=params.days)
        transactions = await plaid.get_transactions(params.access_token, start, end)
        snapshot = build_snapshot(transactions, start, end)

    plan = compose_plan(state, snapshot=snapshot, narration_available=coach is not None)

    if coach is not None:
        try:
            plan.narration = await coach.narrate_plan(plan)
        except CoachError as e:
            logger.warning("Coach narration failed, using fallback: %s", e)
            plan = compose_plan(state, snapshot=snapshot, narration_available=False)

    return format_plan(plan)


@mcp.tool(
    name="finance_ask_coach",
    annotations={
        "title": "Ask the AI Coach",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": True,
    },
)
@handle_tool_errors
async def finance_ask_coach(params: AskCoachInput, ctx: Context) -> str:
    """Ask the AI coach a budgeting, cash-flow, savings or debt question."""
    _, coach = _get_deps(ctx)
    if coach is None:
        return "The AI coach is not configured. Set OPENAI_API_KEY to enable it."
    return await coach.ask(params.message, params.context)


# --- Entry Point ---


def main():
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    mcp.run()


if __name__ == "__main__":
    main()
