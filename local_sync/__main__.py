from local_sync.cli import main

raise SystemExit(main())
