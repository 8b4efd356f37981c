from __future__ import annotations

from stackscript.main import main

raise SystemExit(main())
