from mvs_prerender.cli.prerender import main

if __name__ == "__main__":
    main()
