from telescope_sim_converter.scripts.convert import main

raise SystemExit(main())
