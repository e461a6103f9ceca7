from atomik.app import main

main()
