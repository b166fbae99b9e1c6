from gitcache.cli import main

main()
