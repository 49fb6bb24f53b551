from cronsight.cli import main

main()
