from deliverb_release.cli.app import main

main()
