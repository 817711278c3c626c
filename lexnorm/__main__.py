from lexnorm.cli import main

main()
