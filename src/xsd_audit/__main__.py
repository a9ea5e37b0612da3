from xsd_audit.cli import main

main()
