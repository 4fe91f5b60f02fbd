from create_peachy_app.pipeline import main

main()
