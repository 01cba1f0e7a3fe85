from dts_bundle.cli import main

raise SystemExit(main())
