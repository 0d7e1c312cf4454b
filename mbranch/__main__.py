from mbranch.cli.app import main

main()
