from factorysim.main import main

main()
