"""Prometheus metrics for mcp-gdrive.

Provides metrics for session lifecycle, message routing, tool calls and
credential refresh.
"""

from prometheus_client import Counter, Gauge, Histogram

# Session metrics
ACTIVE_SESSIONS = Gauge(
    "mcp_gdrive_active_sessions",
    "Number of open SSE sessions",
)

SESSIONS_OPENED = Counter(
    "mcp_gdrive_sessions_opened_total",
    "Total number of SSE sessions opened",
)

SESSIONS_REJECTED = Counter(
    "mcp_gdrive_sessions_rejected_total",
    "SSE connections rejected because the session cap was reached",
)

# Routing metrics
MESSAGES_ROUTED = Counter(
    "mcp_gdrive_messages_routed_total",
    "Out-of-band messages delivered to a session",
)

ROUTING_FAILURES = Counter(
    "mcp_gdrive_routing_failures_total",
    "Out-of-band messages that could not be routed",
    labelnames=["reason"],
)

# Protocol metrics
RPC_REQUESTS = Counter(
    "mcp_gdrive_rpc_requests_total",
    "JSON-RPC requests handled by the protocol engine",
    labelnames=["method", "outcome"],
)

TOOL_CALLS = Counter(
    "mcp_gdrive_tool_calls_total",
    "Tool invocations",
    labelnames=["tool", "outcome"],
)

TOOL_LATENCY = Histogram(
    "mcp_gdrive_tool_latency_seconds",
    "Tool handler latency in seconds",
    labelnames=["tool"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0),
)

# Credential metrics
CREDENTIAL_REFRESHES = Counter(
    "mcp_gdrive_credential_refreshes_total",
    "OAuth credential refresh attempts",
    labelnames=["outcome"],
)

# Upstream metrics
UPSTREAM_ERRORS = Counter(
    "mcp_gdrive_upstream_errors_total",
    "Failed calls to the Google APIs",
    labelnames=["status"],
)
