from cdr.cli.app import main

main()
