from qrsites.cli.main import main

raise SystemExit(main())
