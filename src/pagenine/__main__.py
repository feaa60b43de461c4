from pagenine.app import main

main()
