from pathtracer.main import main

main()
