from cimetrics.cli import main

raise SystemExit(main())
