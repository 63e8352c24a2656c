from rosebloom.cli import main

main()
