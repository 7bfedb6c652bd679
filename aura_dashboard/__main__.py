from aura_dashboard.app import main

main()
