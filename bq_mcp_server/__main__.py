from bq_mcp_server.mcp_server import main

main()
