"""Static station list used when the station feed cannot be fetched."""

from tcdd_routes.domain.models.station import Station

FALLBACK_STATIONS: tuple[Station, ...] = (
    Station(id=98, name="ANKARA GAR"),
    Station(id=1325, name="İSTANBUL(SÖĞÜTLÜÇEŞME)"),
    Station(id=48, name="İSTANBUL(PENDİK)"),
    Station(id=1323, name="İSTANBUL(BOSTANCI)"),
    Station(id=1322, name="İSTANBUL(HALKALI)"),
    Station(id=1327, name="İSTANBUL(YEDİKULE)"),
    Station(id=1328, name="İSTANBUL(SİRKECİ)"),
    Station(id=20, name="GEBZE"),
    Station(id=1135, name="İZMİT YHT"),
    Station(id=5, name="ARİFİYE"),
    Station(id=87, name="ESKİŞEHİR"),
    Station(id=103, name="KONYA"),
    Station(id=89, name="AFYONKARAHİSAR"),
    Station(id=92, name="KÜTAHYA"),
    Station(id=100, name="KARAMAN"),
    Station(id=753, name="ADANA"),
    Station(id=170, name="MERSİN"),
    Station(id=130, name="KAYSERİ"),
    Station(id=140, name="SİVAS"),
    Station(id=150, name="ERZURUM"),
    Station(id=151, name="KARS"),
    Station(id=148, name="ELAZIĞ"),
    Station(id=147, name="MALATYA"),
    Station(id=180, name="İZMİR BASMANE"),
    Station(id=181, name="İZMİR ALSANCAK"),
    Station(id=185, name="DENİZLİ"),
    Station(id=77, name="BALIKESİR"),
    Station(id=79, name="BANDIRMA"),
    Station(id=200, name="ZONGULDAK"),
    Station(id=120, name="SAMSUN"),
    Station(id=125, name="AMASYA"),
    Station(id=145, name="TOKAT"),
    Station(id=95, name="ÇANKIRI"),
    Station(id=677, name="GÖLCÜK"),
)
