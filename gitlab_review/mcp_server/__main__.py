from gitlab_review.mcp_server import main

main()
