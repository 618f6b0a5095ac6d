from termcanvas.cli import main

raise SystemExit(main())
