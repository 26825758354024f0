"""Shared calendar fixtures."""

from datetime import date, datetime, timezone

import pytest


STRUCTURAL_HTML = """
<html><body>
<table>
  <tr><th>Data</th><th>Ora</th><th>Prov</th><th>Gara</th></tr>
  <tr>
    <td><b>4/10</b>
      <i>Venerd&igrave;</i>
      RE
    </td>
    <td>19:30</td>
    <td>RE</td>
    <td><b>3&deg; Corsa di Primavera</b><br>
      Via Roma 12, Scandiano<br>
      Percorsi 12-19-29 km. Iscrizione 15&euro;<br>
      Organizzatore: ASD Podisti Scandiano - Tel 333 1234567<br>
      info@podisti.it<br>
      <a href="allegato/locandina.pdf"><img src="img/locandina.png" alt="locandina"></a>
      <a href="https://www.endu.net/it/events/corsa-di-primavera"><img src="img/iscrizione.png" alt="iscrizione"></a>
      <br><a href="allegato/locandina.pdf">scarica</a>
    </td>
  </tr>
  <tr><td colspan="4">Ristoro finale per tutti i partecipanti</td></tr>
  <tr>
    <td><b>20/10</b></td>
    <td>09:00</td>
    <td>RE</td>
    <td>10 km</td>
  </tr>
  <tr>
    <td><b>31/12</b>
      PR
    </td>
    <td>10:00</td>
    <td>PR</td>
    <td><b>Trail del Castello</b><br>
      Piazza Garibaldi, Langhirano (PR)<br>
      Distanze 2,5- 6,5-12- 21. partecipazione libera e gratuita
    </td>
  </tr>
  <tr>
    <td><b>12/11</b></td>
    <td>09:00</td>
    <td>MO</td>
    <td><b>Ritrovo</b><br>Nessuna informazione disponibile sul percorso</td>
  </tr>
</table>
</body></html>
"""

MARKER_HTML = """
<html><body>
<table>
  <tr><td bgcolor="#FFFF99"><b>5/10</b></td><td><b>Maratonina di Correggio</b></td></tr>
  <tr><td></td><td>Corso Mazzini 3, Correggio</td></tr>
  <tr><td></td><td>Percorsi da 7 km e 21 km, quota 10&euro;</td></tr>
  <tr><td style="background-color: yellow">6/10</td><td><b>Camminata tra i colli di Rubiera</b></td></tr>
  <tr><td></td><td>Percorso unico 8km offerta libera</td></tr>
</table>
</body></html>
"""

FLAT_HTML = """
<html><body><div>
4/10 Domenica
Corsa podistica del Donatore AVIS
Via Emilia 5, Rubiera
Percorsi 5-10 km
Iscrizione 8&euro;
8/10 Mercoled&igrave;
Camminata serale per le vie del centro
Piazza Martiri, Modena
Percorso 6 km gratuito
</div></body></html>
"""


@pytest.fixture
def today():
    return date(2024, 9, 1)


@pytest.fixture
def now():
    return datetime(2024, 9, 1, 15, 30, tzinfo=timezone.utc)


@pytest.fixture
def structural_html():
    return STRUCTURAL_HTML


@pytest.fixture
def marker_html():
    return MARKER_HTML


@pytest.fixture
def flat_html():
    return FLAT_HTML
