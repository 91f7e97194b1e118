"""
studien_verwaltung package

Dieses Paket implementiert einen Konsolen-Prototyp zur Verwaltung von Studenten,
Kursen, Einschreibungen und Noten ("Campus Course & Records Manager").

Schichtenarchitektur:
- domain.py: Entitäten + Enums
- result.py: Fehlerarten und Ergebnis-Objekt
- config.py: Einstellungen (pydantic-settings)
- persistence.py: CSV-Persistierung
- service.py: Studenten, Kurse, Einschreibungen, Noten
- report.py: Suche und GPA-Bericht
- importer.py: Import aus Textdateien
- backup.py: Backup mit Zeitstempel
- view.py: Konsolen-Ausgabe
- controller.py: Menü-Orchestrierung
- main.py: Einstiegspunkt
"""
