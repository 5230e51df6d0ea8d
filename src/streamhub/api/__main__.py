from streamhub.api.app import main

main()
