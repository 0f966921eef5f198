from .chain import McpTransport, RestTransport, TransportChain, build_chain
from .mcp_client import MuxDataMcpClient
from .rest import MuxDataRestClient

__all__ = [
    "McpTransport",
    "RestTransport",
    "TransportChain",
    "build_chain",
    "MuxDataMcpClient",
    "MuxDataRestClient",
]
