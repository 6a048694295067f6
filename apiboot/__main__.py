from apiboot.cli import main

main()
