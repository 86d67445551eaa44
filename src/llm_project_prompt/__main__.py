from llm_project_prompt.cli import main

raise SystemExit(main())
