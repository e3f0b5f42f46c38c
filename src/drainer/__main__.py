from drainer.main import main

main()
