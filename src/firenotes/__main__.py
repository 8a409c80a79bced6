from firenotes.main import main

main()
