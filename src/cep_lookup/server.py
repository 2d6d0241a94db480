from __future__ import annotations

import logging

from fastmcp import FastMCP

from cep_lookup.app.container import build_container
from cep_lookup.app.logger import configure_logging
from cep_lookup.app.settings import get_settings
from cep_lookup.tools.cep_tools import register_cep_tools

_settings = get_settings()
configure_logging(_settings.log_level)
log = logging.getLogger(__name__)

mcp = FastMCP("cep-lookup")

try:
    _container = build_container(_settings)
    register_cep_tools(mcp, _container)
    log.info("CEP tools registered successfully")
except Exception as e:
    log.error("Failed to register CEP tools: %s", e, exc_info=True)
    raise


def main() -> None:
    mcp.run(
        transport="http",
        host=_settings.mcp_host,
        port=_settings.mcp_port,
        path=_settings.mcp_path,
    )


if __name__ == "__main__":
    main()
