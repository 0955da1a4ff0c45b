"""FastMCP Cloud entrypoint for the n8n gateway.

FastMCP Cloud imports this module and runs the ``mcp`` server instance.
Connection settings come from N8N_API_URL / N8N_API_KEY in the environment.
"""

from dotenv import load_dotenv

from n8n_gateway.gateway.server import create_gateway

load_dotenv()

mcp = create_gateway(check_connectivity=True)
